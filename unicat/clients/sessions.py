from types import TracebackType
from typing import List, Mapping, Optional, Type

import aiohttp

from unicat.helpers import versions


class APIContext:
    """
    The server URL and the HTTP session to talk to it.

    The context is passed explicitly to every API call: there is no global
    client state. The session can be provided from outside (e.g. with custom
    connectors or auth), or created by the context itself; only the self-created
    sessions are closed by the context. The context's headers are sent with
    every request in both cases, on top of the session's own default headers.

    Usage::

        async with APIContext('https://catalog.example.com') as context:
            await read_location(name='abc', context=context, ...)
    """

    server: str
    session: aiohttp.ClientSession
    headers: Mapping[str, str]

    # The responses not yet read to the end, to be released on closing.
    responses: List[aiohttp.ClientResponse]

    def __init__(
            self,
            server: str,
            *,
            session: Optional[aiohttp.ClientSession] = None,
            headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        super().__init__()
        self.server = server
        self.headers = dict(headers or {})
        self.responses = []
        self._own_session = session is None
        if session is None:
            session = aiohttp.ClientSession()
        self.session = session
        self.session.headers.setdefault('User-Agent', f'unicat/{versions.version or "dev"}')

    async def __aenter__(self) -> "APIContext":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    def add_response(self, response: aiohttp.ClientResponse) -> None:
        self.responses[:] = [r for r in self.responses if not r.closed]
        if not response.closed:
            self.responses.append(response)

    async def close(self) -> None:
        # The responses must be released before their session is closed.
        for response in self.responses:
            if not response.closed:
                response.close()
        self.responses.clear()
        if self._own_session:
            await self.session.close()
