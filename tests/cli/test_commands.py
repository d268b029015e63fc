import asyncio
import json

import aiohttp
import pytest
import yaml

from unicat.cli import CLIControls
from unicat.clients.errors import APINotFoundError
from unicat.reactor.updating import UpdateResult
from unicat.structs.configuration import Settings
from unicat.structs.outcomes import Outcome
from unicat.structs.patches import UpdateCall
from unicat.structs.states import ResourceState

SERVER = 'https://catalog.example.com'


def test_help(invoke):
    result = invoke(['--help'])
    assert result.exit_code == 0
    assert 'plan' in result.output
    assert 'update' in result.output
    assert 'show' in result.output


def test_version(invoke):
    result = invoke(['--version'])
    assert result.exit_code == 0
    assert result.output.startswith('unicat, version ')


def test_plan_prints_the_calls(invoke, plan_location, desired_file):
    plan_location.return_value = [
        UpdateCall.for_owner('updatedOwner'),
        UpdateCall.for_bundle({'url': 's3://foo/bar', 'credential_name': 'xyz'}, force=True),
    ]

    result = invoke(['plan', 'abc', '-f', str(desired_file), '-s', SERVER])

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert [json.loads(line) for line in lines] == [
        {'group': 'owner', 'payload': {'owner': 'updatedOwner'}},
        {'group': 'bundle', 'payload': {'url': 's3://foo/bar', 'credential_name': 'xyz',
                                        'force': True}},
    ]
    assert plan_location.call_count == 1
    assert plan_location.call_args.kwargs['name'] == 'abc'
    assert plan_location.call_args.kwargs['desired'] == ResourceState(
        name='abc', owner='updatedOwner', url='s3://foo/bar', credential_name='xyz')


def test_update_prints_the_new_state(invoke, update_location, desired_file):
    state = ResourceState(name='abc', owner='updatedOwner', url='s3://foo/bar')
    update_location.return_value = UpdateResult(outcome=Outcome(), state=state)

    result = invoke(['update', 'abc', '-f', str(desired_file), '-s', SERVER])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {'name': 'abc', 'owner': 'updatedOwner',
                                         'url': 's3://foo/bar'}


def test_update_failure_exits_with_the_message(invoke, update_location, desired_file):
    error = APINotFoundError({'error_code': 'X', 'message': 'Something unexpected happened'},
                             status=404)
    update_location.return_value = UpdateResult(outcome=Outcome(exception=error), state=None)

    result = invoke(['update', 'abc', '-f', str(desired_file), '-s', SERVER])

    assert result.exit_code == 1
    assert 'Something unexpected happened' in result.output


def test_remote_errors_are_reported_without_tracebacks(invoke, read_location):
    read_location.side_effect = APINotFoundError({'message': 'Not found: abc'}, status=404)

    result = invoke(['show', 'abc', '-s', SERVER])

    assert result.exit_code == 1
    assert 'APINotFoundError: Not found: abc' in result.output
    assert 'Traceback' not in result.output


@pytest.mark.parametrize('error, message', [
    (asyncio.TimeoutError(), 'The request to the server has timed out.'),
    (aiohttp.ServerDisconnectedError(), 'Cannot connect to the server'),
])
def test_network_errors_are_reported_without_tracebacks(invoke, read_location, error, message):
    read_location.side_effect = error

    result = invoke(['show', 'abc', '-s', SERVER, '--request-timeout', '0.2'])

    assert result.exit_code == 1
    assert message in result.output
    assert 'Traceback' not in result.output


def test_timeouts_while_planning_and_updating(invoke, plan_location, update_location,
                                              desired_file):
    plan_location.side_effect = asyncio.TimeoutError()
    update_location.side_effect = asyncio.TimeoutError()

    for command in ['plan', 'update']:
        result = invoke([command, 'abc', '-f', str(desired_file), '-s', SERVER])
        assert result.exit_code == 1
        assert 'timed out' in result.output


def test_show_prints_yaml(invoke, read_location):
    read_location.return_value = ResourceState(name='abc', owner='someone', metastore_id='fgh')

    result = invoke(['show', 'abc', '-s', SERVER])

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(result.output) == {'name': 'abc', 'owner': 'someone',
                                             'metastore_id': 'fgh'}


def test_headers_are_passed_to_the_session(invoke, read_location, mocker):
    context_cls = mocker.patch('unicat.clients.sessions.APIContext')
    context_cls.return_value.__aenter__.return_value = context_cls.return_value
    read_location.return_value = ResourceState(name='abc')

    result = invoke(['show', 'abc', '-s', SERVER,
                     '-H', 'Authorization: Bearer 123', '-H', 'X-Custom:value'])

    assert result.exit_code == 0, result.output
    assert context_cls.call_args.args == (SERVER,)
    assert context_cls.call_args.kwargs == {'session': None,
                                            'headers': {'Authorization': 'Bearer 123',
                                                        'X-Custom': 'value'}}


def test_headers_are_kept_with_an_injected_session(invoke, read_location, mocker):
    context_cls = mocker.patch('unicat.clients.sessions.APIContext')
    context_cls.return_value.__aenter__.return_value = context_cls.return_value
    read_location.return_value = ResourceState(name='abc')
    session = mocker.sentinel.session

    result = invoke(['show', 'abc', '-s', SERVER, '-H', 'Authorization: Bearer 123'],
                    obj=CLIControls(session=session))

    assert result.exit_code == 0, result.output
    assert context_cls.call_args.kwargs == {'session': session,
                                            'headers': {'Authorization': 'Bearer 123'}}


def test_malformed_headers_are_rejected(invoke, read_location):
    result = invoke(['show', 'abc', '-s', SERVER, '-H', 'no-colon-here'])
    assert result.exit_code == 2
    assert 'Name: value' in result.output
    assert not read_location.called


def test_server_is_required(invoke, read_location):
    result = invoke(['show', 'abc'])
    assert result.exit_code == 2
    assert not read_location.called


def test_server_from_envvars(invoke, read_location):
    read_location.return_value = ResourceState(name='abc')
    result = invoke(['show', 'abc'], env={'UNICAT_SHOW_SERVER': SERVER})
    assert result.exit_code == 0, result.output


def test_invalid_desired_state_is_rejected(invoke, update_location, tmp_path):
    path = tmp_path / 'desired.yaml'
    path.write_text("owner: someone\nisolation_mode: OPEN\n")

    result = invoke(['update', 'abc', '-f', str(path), '-s', SERVER])

    assert result.exit_code == 2
    assert 'isolation_mode' in result.output
    assert not update_location.called


def test_mismatching_name_is_rejected(invoke, update_location, tmp_path):
    path = tmp_path / 'desired.yaml'
    path.write_text("name: xyz\nowner: someone\n")

    result = invoke(['update', 'abc', '-f', str(path), '-s', SERVER])

    assert result.exit_code == 2
    assert not update_location.called


def test_settings_from_controls_and_options(invoke, update_location, desired_file):
    settings = Settings()
    update_location.return_value = UpdateResult(outcome=Outcome(), state=None)

    result = invoke(['update', 'abc', '-f', str(desired_file), '-s', SERVER,
                     '--request-timeout', '12.5'],
                    obj=CLIControls(settings=settings))

    assert result.exit_code == 0, result.output
    assert update_location.call_args.kwargs['settings'] is settings
    assert settings.networking.request_timeout == 12.5
