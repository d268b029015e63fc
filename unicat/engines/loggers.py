"""
Per-location logging and the logging configuration.

Every message logged via `LocationLogger` carries a reference to its location.
The text logs render the reference as a ``[name]`` prefix of the message.
The JSON logs put it into a separate field, so that the log parsers can
filter the messages of a specific location without parsing the text.

The messages of the library itself (not of the locations) go through
the regular named loggers and are formatted the same way, just without
the location references.
"""
import copy
import enum
import logging
from typing import TYPE_CHECKING, Any, Mapping, MutableMapping, Optional, TextIO, Tuple, Union

from pythonjsonlogger.core import RESERVED_ATTRS
from pythonjsonlogger.json import JsonFormatter

from unicat.helpers import typedefs

logger = logging.getLogger('unicat.locations')

# The record's attribute with the location reference (not rendered as an extra field).
REFERENCE_ATTR = 'location_ref'

# A key for the location references in JSON logs, as seen by the log parsers.
DEFAULT_JSON_REFKEY = 'object'

# Severities as understood by most log collectors; anything above ERROR is fatal.
SEVERITIES: Tuple[Tuple[int, str], ...] = (
    (logging.DEBUG, 'debug'),
    (logging.INFO, 'info'),
    (logging.WARNING, 'warn'),
    (logging.ERROR, 'error'),
)


class LogFormat(enum.Enum):
    """ The log formats accepted by the ``--log-format`` option. """
    PLAIN = '%(message)s'
    FULL = '[%(asctime)s] %(name)-24.24s %(levelname)-8.8s %(message)s'
    JSON = None  # the fields are defined by the JSON formatter itself


def get_reference(record: logging.LogRecord) -> Optional[Mapping[str, Any]]:
    ref = getattr(record, REFERENCE_ATTR, None)
    return ref if isinstance(ref, Mapping) else None


def get_severity(levelno: int) -> str:
    for threshold, severity in SEVERITIES:
        if levelno <= threshold:
            return severity
    return 'fatal'


class LocationFormatter(logging.Formatter):
    """ A marker of our own formatters, to find our own handlers on re-configuration. """


class LocationTextFormatter(LocationFormatter):
    pass


class LocationJsonFormatter(LocationFormatter, JsonFormatter):
    """
    A JSON formatter with the location reference and the severity as fields.

    The reference is added under ``refkey`` (``"object"`` by default)
    as a nested object, e.g. ``{"object": {"name": "my-location"}}``.
    """

    def __init__(self, *args: Any, refkey: Optional[str] = None, **kwargs: Any) -> None:
        reserved_attrs = set(kwargs.pop('reserved_attrs', RESERVED_ATTRS)) | {REFERENCE_ATTR}
        kwargs.update(reserved_attrs=reserved_attrs, timestamp=kwargs.get('timestamp', True))
        super().__init__(*args, **kwargs)
        self.refkey = refkey or DEFAULT_JSON_REFKEY

    def add_fields(
            self,
            log_record: MutableMapping[str, Any],
            record: logging.LogRecord,
            message_dict: MutableMapping[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)  # type: ignore
        ref = get_reference(record)
        if ref is not None:
            log_record[self.refkey] = dict(ref)
        log_record.setdefault('severity', get_severity(record.levelno))


class LocationPrefixingMixin(LocationFormatter):
    """ Render the location reference as a prefix of the message itself. """

    def format(self, record: logging.LogRecord) -> str:
        ref = get_reference(record)
        if ref is not None and ref.get('name'):
            record = copy.copy(record)  # the original record goes to other handlers as is.
            record.msg = f"[{ref['name']}] {record.msg}"
        return super().format(record)


class LocationPrefixingTextFormatter(LocationPrefixingMixin, LocationTextFormatter):
    pass


class LocationPrefixingJsonFormatter(LocationPrefixingMixin, LocationJsonFormatter):
    pass


class LocationLogger(typedefs.LoggerAdapter):
    """
    A logger adapter to carry the location's reference for formatting.

    Created for every update of every location. Only the name is carried:
    it is the only stable identifier of a location in the catalog API.
    """

    def __init__(self, *, name: str) -> None:
        super().__init__(logger, {REFERENCE_ATTR: {'name': name}})

    def process(
            self,
            msg: str,
            kwargs: MutableMapping[str, Any],
    ) -> Tuple[str, MutableMapping[str, Any]]:
        # The stock adapter replaces the per-message extras; ours go below them instead.
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get('extra', {})}
        return msg, kwargs


if TYPE_CHECKING:
    _StreamHandler = logging.StreamHandler[TextIO]
else:
    _StreamHandler = logging.StreamHandler


class LocationStreamHandler(_StreamHandler):
    """ Our own handler: replaced on re-configuration, other handlers are kept. """


def configure(
        debug: Optional[bool] = None,
        verbose: Optional[bool] = None,
        quiet: Optional[bool] = None,
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> None:
    """
    Configure the root logger with one handler of our own (to stderr).

    It is safe to call it repeatedly (e.g. in the CLI tests): the previously
    installed own handlers are removed, while the foreign ones are kept.
    """
    level = logging.DEBUG if debug or verbose else logging.WARNING if quiet else logging.INFO
    handler = LocationStreamHandler()
    handler.setFormatter(make_formatter(log_format, log_prefix=log_prefix, log_refkey=log_refkey))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, LocationStreamHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    # The event loop's messages are only useful when debugging the library itself.
    asyncio_logger = logging.getLogger('asyncio')
    asyncio_logger.propagate = bool(debug)
    asyncio_logger.handlers[:] = [] if debug else [logging.NullHandler()]


def make_formatter(
        log_format: Union[LogFormat, str] = LogFormat.FULL,
        *,
        log_prefix: Optional[bool] = False,
        log_refkey: Optional[str] = None,
) -> LocationFormatter:
    """
    Create a formatter for the requested format (or an arbitrary %-style string).

    If ``log_prefix`` is ``None``, the prefixes are added to the text logs only:
    the JSON logs have the location references as separate fields anyway.
    """
    if log_format is LogFormat.JSON:
        if log_prefix:
            return LocationPrefixingJsonFormatter(refkey=log_refkey)
        return LocationJsonFormatter(refkey=log_refkey)

    if isinstance(log_format, LogFormat):
        fmt = log_format.value
    elif isinstance(log_format, str):
        fmt = log_format
    else:
        raise ValueError(f"Unsupported log format: {log_format!r}")

    prefixed = True if log_prefix is None else log_prefix
    if prefixed:
        return LocationPrefixingTextFormatter(fmt)
    return LocationTextFormatter(fmt)
