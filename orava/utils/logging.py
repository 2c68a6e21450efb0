"""Logging setup for orava.

Every logger lives under the ``orava`` namespace and nothing is configured on
import; applications attach handlers themselves or call
:func:`configure_logging`. Records may carry structured fields (passed through
``extra={"extra_fields": {...}}`` or :func:`log_with_context`) and the
correlation ID of the current context. :class:`StructuredFormatter` renders both
as one JSON object per line.
"""

import logging
from contextvars import ContextVar
from typing import IO, TYPE_CHECKING, Any, Final, Optional, Union

from orava._serialization import encode_json

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = (
    "MAX_LOGGED_SQL_LENGTH",
    "ROOT_LOGGER_NAME",
    "CorrelationIDFilter",
    "StructuredFormatter",
    "configure_logging",
    "correlation_id_var",
    "get_correlation_id",
    "get_logger",
    "log_with_context",
    "set_correlation_id",
)

ROOT_LOGGER_NAME: Final = "orava"
MAX_LOGGED_SQL_LENGTH: Final = 200
PLAIN_FORMAT: Final = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

correlation_id_var: "ContextVar[Optional[str]]" = ContextVar("orava_correlation_id", default=None)


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Tag log records emitted from the current context; ``None`` clears the tag."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def _shorten_sql(sql: str) -> str:
    if len(sql) <= MAX_LOGGED_SQL_LENGTH:
        return sql
    return f"{sql[:MAX_LOGGED_SQL_LENGTH]}..."


class StructuredFormatter(logging.Formatter):
    """Render records as single-line JSON.

    Structured fields are merged into the top-level object. A field named
    ``sql`` is shortened to :data:`MAX_LOGGED_SQL_LENGTH` characters.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.funcName}:{record.lineno}",
        }
        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        fields: Optional[dict[str, Any]] = getattr(record, "extra_fields", None)
        if fields:
            entry.update(fields)
            if isinstance(entry.get("sql"), str):
                entry["sql"] = _shorten_sql(entry["sql"])

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return str(encode_json(entry))


class CorrelationIDFilter(logging.Filter):
    """Copy the context's correlation ID onto each record as ``correlation_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        correlation_id = get_correlation_id()
        if correlation_id:
            record.correlation_id = correlation_id  # type: ignore[attr-defined]
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the ``orava`` logger or one of its children.

    ``get_logger("driver")`` and ``get_logger("orava.driver")`` name the same
    logger. Each logger gets exactly one :class:`CorrelationIDFilter`.
    """
    if not name or name == ROOT_LOGGER_NAME:
        qualified = ROOT_LOGGER_NAME
    elif name.startswith(f"{ROOT_LOGGER_NAME}."):
        qualified = name
    else:
        qualified = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(qualified)
    if not any(isinstance(existing, CorrelationIDFilter) for existing in logger.filters):
        logger.addFilter(CorrelationIDFilter())
    return logger


def configure_logging(
    level: Union[int, str] = logging.INFO,
    *,
    structured: bool = True,
    stream: Optional[IO[str]] = None,
    handlers: "Optional[Iterable[logging.Handler]]" = None,
) -> logging.Logger:
    """Attach a stream handler to the ``orava`` logger, replacing existing handlers.

    The ``orava`` logger stops propagating to the root logger afterwards.

    Args:
        level: Level name (``"DEBUG"``) or number.
        structured: Use :class:`StructuredFormatter`; plain text otherwise.
        stream: Stream for the default handler. Defaults to ``sys.stderr``.
        handlers: Extra handlers, attached as given.

    Returns:
        The configured ``orava`` logger.
    """
    logger = get_logger()
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.handlers.clear()

    default_handler = logging.StreamHandler(stream)
    default_handler.setFormatter(StructuredFormatter() if structured else logging.Formatter(PLAIN_FORMAT))
    logger.addHandler(default_handler)
    for handler in handlers or ():
        logger.addHandler(handler)
    logger.propagate = False

    log_with_context(
        logger,
        logging.DEBUG,
        "orava logging configured",
        level=logging.getLevelName(logger.level),
        structured=structured,
        handler_count=len(logger.handlers),
    )
    return logger


def log_with_context(logger: logging.Logger, level: int, message: str, /, **extra_fields: Any) -> None:
    """Log ``message`` with ``extra_fields`` attached for the structured formatter.

    Nothing is built when ``level`` is disabled for ``logger``.
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields}, stacklevel=2)
