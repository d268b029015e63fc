"""
Rudimentary type [re-]definitions for mypy, not supported by the runtime.

E.g. ``logging.LoggerAdapter`` is a generic class in the type-sheds,
but cannot be parametrized at runtime in all supported Python versions.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# As publicly exposed: we only promise that it is based on one of the built-in loggable classes.
Logger = Union[logging.Logger, LoggerAdapter]
