import asyncio
import dataclasses
import functools
import json
from typing import IO, Any, Callable, Coroutine, Dict, Optional, Sequence, Tuple, \
                    TypeVar

import aiohttp
import click

from unicat.clients import errors, fetching, sessions
from unicat.engines import loggers
from unicat.reactor import updating
from unicat.structs import configuration, patches, states

_T = TypeVar('_T')


@dataclasses.dataclass()
class CLIControls:
    """ Controls, which are impossible to pass via CLI (e.g. in tests or embedding). """
    settings: Optional[configuration.Settings] = None
    session: Optional[aiohttp.ClientSession] = None


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


class HeaderParamType(click.ParamType):
    name = 'header'

    def convert(self, value: Any, param: Any, ctx: Any) -> Tuple[str, str]:
        if isinstance(value, tuple):
            return value
        key, sep, val = str(value).partition(':')
        if not sep or not key.strip():
            self.fail(f"{value!r} is not in the 'Name: value' format.", param, ctx)
        return key.strip(), val.strip()


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def connection_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to add the server & headers options to all commands the same way."""
    @click.option('-s', '--server', type=str, required=True)
    @click.option('-H', '--header', 'headers', type=HeaderParamType(), multiple=True)
    @click.option('--request-timeout', type=float)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return fn(*args, **kwargs)

    return wrapper


@click.version_option(prog_name='unicat')
@click.group(name='unicat', context_settings=dict(
    auto_envvar_prefix='UNICAT',
))
def main() -> None:
    pass


@main.command()
@logging_options
@connection_options
@click.option('-f', '--file', 'source', type=click.File('r'), required=True)
@click.argument('name')
@click.make_pass_decorator(CLIControls, ensure=True)
def plan(
        __controls: CLIControls,
        name: str,
        source: IO[str],
        server: str,
        headers: Sequence[Tuple[str, str]],
        request_timeout: Optional[float],
) -> None:
    """ Show the partial updates needed for a location, but do not apply them. """
    desired = _load_desired(source, name=name)
    settings = _make_settings(__controls, request_timeout=request_timeout)

    async def _plan() -> Sequence[patches.UpdateCall]:
        async with _make_context(__controls, server=server, headers=headers) as context:
            return await updating.plan_location(
                name=name,
                desired=desired,
                context=context,
                settings=settings,
                logger=loggers.LocationLogger(name=name),
            )

    calls = _run(_plan())
    for call in calls:
        click.echo(json.dumps({'group': str(call.group), 'payload': call.as_payload()}, sort_keys=True))


@main.command()
@logging_options
@connection_options
@click.option('-f', '--file', 'source', type=click.File('r'), required=True)
@click.argument('name')
@click.make_pass_decorator(CLIControls, ensure=True)
def update(
        __controls: CLIControls,
        name: str,
        source: IO[str],
        server: str,
        headers: Sequence[Tuple[str, str]],
        request_timeout: Optional[float],
) -> None:
    """ Update a location to the desired state, with the owner rolled back on failures. """
    desired = _load_desired(source, name=name)
    settings = _make_settings(__controls, request_timeout=request_timeout)

    async def _update() -> updating.UpdateResult:
        async with _make_context(__controls, server=server, headers=headers) as context:
            return await updating.update_location(
                name=name,
                desired=desired,
                context=context,
                settings=settings,
                logger=loggers.LocationLogger(name=name),
            )

    result = _run(_update())
    if result.state is not None:
        click.echo(json.dumps(result.state.as_raw(), sort_keys=True))
    if not result.outcome.succeeded:
        raise click.ClickException(result.outcome.message or "Failed to update.")


@main.command()
@logging_options
@connection_options
@click.argument('name')
@click.make_pass_decorator(CLIControls, ensure=True)
def show(
        __controls: CLIControls,
        name: str,
        server: str,
        headers: Sequence[Tuple[str, str]],
        request_timeout: Optional[float],
) -> None:
    """ Show the current state of a location as YAML (e.g. for the desired state). """
    settings = _make_settings(__controls, request_timeout=request_timeout)

    async def _show() -> states.ResourceState:
        async with _make_context(__controls, server=server, headers=headers) as context:
            return await fetching.read_location(
                name=name,
                context=context,
                settings=settings,
                logger=loggers.LocationLogger(name=name),
            )

    state = _run(_show())
    click.echo(states.dump_state(state), nl=False)


def _load_desired(source: IO[str], *, name: str) -> states.ResourceState:
    try:
        return states.load_desired(source, name=name)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'-f' / '--file'")


def _make_settings(
        controls: CLIControls,
        *,
        request_timeout: Optional[float],
) -> configuration.Settings:
    settings = controls.settings if controls.settings is not None else configuration.Settings()
    if request_timeout is not None:
        settings.networking.request_timeout = request_timeout
    return settings


def _make_context(
        controls: CLIControls,
        *,
        server: str,
        headers: Sequence[Tuple[str, str]],
) -> sessions.APIContext:
    header_map: Dict[str, str] = dict(headers)
    return sessions.APIContext(server, session=controls.session, headers=header_map)


def _run(coro: Coroutine[Any, Any, _T]) -> _T:
    # The remote failures are the expected ones: report them without the tracebacks.
    try:
        return asyncio.run(coro)
    except errors.APIError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")
    except asyncio.TimeoutError:
        raise click.ClickException("The request to the server has timed out.")
    except aiohttp.ClientConnectionError as e:
        raise click.ClickException(f"Cannot connect to the server: {e}")
