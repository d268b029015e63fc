"""
All configuration flags, options, settings to fine-tune the library.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are optional, some are not (but all of them have
reasonable defaults). The settings are passed explicitly to every API call,
there are no global settings.
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for each individual request to the catalog API (in seconds).

    The update transactions have no timeouts of their own: every call
    either finishes within this timeout, or fails with a timeout error.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for the connection establishment (in seconds).
    If ``None``, only the request timeout applies.
    """


@dataclasses.dataclass
class Settings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
