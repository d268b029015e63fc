import functools
import logging

import click.testing
import pytest

from unicat.cli import main


@pytest.fixture(autouse=True)
def _restore_root_logger():
    # The CLI configures the logging with handlers into the runner's streams, closed afterwards.
    logger = logging.getLogger()
    original_handlers = logger.handlers[:]
    original_level = logger.level
    yield
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)


@pytest.fixture()
def runner():
    return click.testing.CliRunner()


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def desired_file(tmp_path):
    path = tmp_path / 'desired.yaml'
    path.write_text("owner: updatedOwner\n"
                    "url: s3://foo/bar\n"
                    "credential_name: xyz\n")
    return path


@pytest.fixture()
def update_location(mocker):
    return mocker.patch('unicat.reactor.updating.update_location')


@pytest.fixture()
def plan_location(mocker):
    return mocker.patch('unicat.reactor.updating.plan_location')


@pytest.fixture()
def read_location(mocker):
    return mocker.patch('unicat.clients.fetching.read_location')
