"""
Errors of the catalog API, independent of the HTTP client library.

The callers never see the ``aiohttp`` errors for the API-level failures:
those are converted to our own errors, with the ``aiohttp`` error chained
as the cause (for the stack traces only, not for the handling).

The errors carry what the API reports in the response bodies: the machine-
readable ``error_code`` and the human-readable ``message``. The message is
used verbatim as the error's text, so that the errors can be composed
into longer messages (e.g. with the rollback errors) without decorations.

The network-level errors (connectivity, TLS, timeouts) are not converted:
they are not about the catalog API, and are escalated from ``aiohttp`` as is.
"""
import collections.abc
import json
from typing import Collection, Mapping, Optional, Type

import aiohttp

from unicat.structs import bodies


class APIError(Exception):
    """ A failed API request: any HTTP status 4xx or 5xx. """

    def __init__(
            self,
            payload: Optional[bodies.RawError],
            *,
            status: int,
    ) -> None:
        self._status = status
        self._payload: bodies.RawError = payload or {}
        super().__init__(self.message or f"HTTP {status}")

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> Optional[str]:
        return self._payload.get('error_code')

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message')

    @property
    def details(self) -> Optional[Collection[bodies.RawErrorDetail]]:
        return self._payload.get('details')


class APIUnauthorizedError(APIError):
    """ HTTP 401: the credentials are absent, invalid, or expired. """


class APIForbiddenError(APIError):
    """ HTTP 403: the principal has no permission, e.g. after an owner change. """


class APINotFoundError(APIError):
    """ HTTP 404: the location does not exist (or is not visible). """


class APIConflictError(APIError):
    """ HTTP 409: e.g. the storage URL overlaps with another location. """


class APIServerError(APIError):
    """ HTTP 5xx: the server has failed; the request may or may not have had effects. """


ERRORS_BY_STATUS: Mapping[int, Type[APIError]] = {
    401: APIUnauthorizedError,
    403: APIForbiddenError,
    404: APINotFoundError,
    409: APIConflictError,
}


def get_error_class(status: int) -> Type[APIError]:
    if status >= 500:
        return APIServerError
    return ERRORS_BY_STATUS.get(status, APIError)


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Raise our own error for the failed responses, with the details from the body.
    """
    if response.status < 400:
        return

    # The body must be read now: raise_for_status() releases the connection.
    try:
        payload = await response.json(content_type=None)
    except (json.JSONDecodeError, UnicodeDecodeError, aiohttp.ClientConnectionError):
        payload = None

    # E.g. the HTML pages or plain texts of the gateways & proxies are not the API errors.
    is_api_error = (
        isinstance(payload, collections.abc.Mapping) and
        ('error_code' in payload or 'message' in payload)
    )

    cls = get_error_class(response.status)
    try:
        response.raise_for_status()
    except aiohttp.ClientResponseError as e:
        raise cls(payload if is_api_error else None, status=response.status) from e
