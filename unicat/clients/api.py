import asyncio
from typing import Any, Mapping, Optional

import aiohttp

from unicat.clients import errors, sessions
from unicat.helpers import typedefs
from unicat.structs import configuration


async def request(
        method: str,
        url: str,  # relative to the server/api root.
        *,
        context: sessions.APIContext,
        settings: configuration.Settings,
        payload: Optional[object] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> aiohttp.ClientResponse:
    """
    Perform a single request and check its response for errors.

    There are no retries: every request is attempted exactly once.
    The callers decide if and how the failed requests should be repeated.
    """
    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')

    if timeout is None:
        timeout = aiohttp.ClientTimeout(
            total=settings.networking.request_timeout,
            sock_connect=settings.networking.connect_timeout,
        )

    what = f"{method.upper()} {url}"
    try:
        logger.debug(f"Requesting: {what}")
        response = await context.session.request(
            method=method,
            url=url,
            json=payload,
            headers={**context.headers, **(headers or {})},
            timeout=timeout,
        )
        context.add_response(response)
        await errors.check_response(response)  # but do not parse it!
    except (aiohttp.ClientConnectionError, errors.APIError, asyncio.TimeoutError) as e:
        logger.debug(f"Request failed: {what} -> {e!r}")
        raise
    return response


async def get(
        url: str,  # relative to the server/api root.
        *,
        context: sessions.APIContext,
        settings: configuration.Settings,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[aiohttp.ClientTimeout] = None,
        logger: typedefs.Logger,
) -> Any:
    response = await request(
        method='get',
        url=url,
        headers=headers,
        timeout=timeout,
        context=context,
        settings=settings,
        logger=logger,
    )
    async with response:
        return await response.json(content_type=None)

