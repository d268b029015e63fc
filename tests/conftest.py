import asyncio
import collections
import dataclasses
import json
import logging
from typing import Any, Deque, Dict, List, Optional, Tuple

import aiohttp.test_utils
import aiohttp.web
import pytest

from unicat.clients.sessions import APIContext
from unicat.structs.configuration import Settings
from unicat.structs.states import ResourceState


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def logger():
    return logging.getLogger('unicat.tests')


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


@pytest.fixture()
def observed():
    return ResourceState(
        name='abc',
        url='s3://foo/bar',
        credential_name='abc',
        comment='def',
        owner='administrators',
    )


#
# A fake catalog API server. Reasons:
# 1. We do not test aiohttp, we test the layers on top of it,
#    so the requests go through the real client session to a local server.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@dataclasses.dataclass(frozen=True)
class RecordedRequest:
    method: str
    path: str
    query: Dict[str, str]
    headers: Dict[str, str]
    data: Any


class FakeAPI:
    """
    Queued responses per method & path, and the recorded requests.

    Sample usage::

        async def test_me(fake_api, context):
            fake_api.add('get', '/path', {'a': 'b'})
            do_something()
            assert len(fake_api.requests) == 1
            assert fake_api.requests[0].data == ...

    Unmatched requests get HTTP 599 (so that they fail loudly in the tests).
    """

    def __init__(self) -> None:
        self.responses: Dict[Tuple[str, str], Deque[Tuple[aiohttp.web.Response, float]]] = {}
        self.requests: List[RecordedRequest] = []
        self.server: Optional[aiohttp.test_utils.TestServer] = None

    @property
    def url(self) -> str:
        assert self.server is not None
        return str(self.server.make_url('/'))

    def add(
            self,
            method: str,
            path: str,
            data: Any = None,
            *,
            status: int = 200,
            delay: float = 0,
    ) -> None:
        if isinstance(data, aiohttp.web.Response):
            response = data
        elif data is None:
            response = aiohttp.web.Response(status=status)
        else:
            response = aiohttp.web.json_response(data, status=status)
        key = (method.upper(), path)
        self.responses.setdefault(key, collections.deque()).append((response, delay))

    def add_error(self, method: str, path: str, *, status: int, code: str, message: str) -> None:
        self.add(method, path, {'error_code': code, 'message': message}, status=status)

    async def handle(self, request: aiohttp.web.Request) -> aiohttp.web.StreamResponse:
        text = await request.text()
        try:
            data = json.loads(text) if text else None
        except json.JSONDecodeError:
            data = text
        self.requests.append(RecordedRequest(
            method=request.method,
            path=request.path,
            query=dict(request.query),
            headers=dict(request.headers),
            data=data,
        ))
        queue = self.responses.get((request.method, request.path))
        if not queue:
            return aiohttp.web.json_response({'error_code': 'NOT_MOCKED',
                                              'message': f"{request.method} {request.path}"},
                                             status=599)
        response, delay = queue.popleft()
        if delay:
            await asyncio.sleep(delay)
        return response


@pytest.fixture()
async def fake_api():
    api = FakeAPI()
    app = aiohttp.web.Application()
    app.router.add_route('*', '/{tail:.*}', api.handle)
    server = aiohttp.test_utils.TestServer(app)
    await server.start_server()
    api.server = server
    try:
        yield api
    finally:
        await server.close()


@pytest.fixture()
async def context(fake_api):
    async with APIContext(fake_api.url) as context:
        yield context
