"""
Logging setup for the label_proof package.

Provides:
- ConsoleFormatter for the operator's terminal
- JSONFormatter for one-record-per-line log files
- log_timing context manager wrapped around workflow steps
- LogContext to stamp fields (proof title, mode) on every record

Usage:
    from label_proof.logging_config import setup_logging, get_logger

    setup_logging(level=logging.INFO, json_file="proof.log.json")

    logger = get_logger(__name__)
    logger.info("Drawing dieline", extra={"label_type": "Rolls"})
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union

PACKAGE_LOGGER = "label_proof"

# Attributes every LogRecord has; anything else came in through ``extra``.
_RECORD_KEYS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime'}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_KEYS}


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Output format:
        {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", ...}
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_extra:
            for key, value in _extra_fields(record).items():
                try:
                    json.dumps(value)
                    entry[key] = value
                except (TypeError, ValueError):
                    entry[key] = str(value)

        return json.dumps(entry, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Format: ``[TIME] LEVEL logger: message [key=value, ...]``"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, show_extra: bool = True):
        super().__init__()
        self.use_colors = use_colors
        self.show_extra = show_extra

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        level = f"{record.levelname:8}"
        if self.use_colors and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        name = record.name
        if name.startswith(PACKAGE_LOGGER + "."):
            name = name[len(PACKAGE_LOGGER) + 1:]

        extra_str = ""
        if self.show_extra:
            extras = []
            for key, value in _extra_fields(record).items():
                if isinstance(value, float):
                    extras.append(f"{key}={value:.3g}")
                else:
                    extras.append(f"{key}={value}")
            if extras:
                extra_str = " [" + ", ".join(extras) + "]"

        result = f"[{time_str}] {level} {name}: {record.getMessage()}{extra_str}"
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(
    level: int = logging.INFO,
    json_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    use_colors: bool = True,
) -> logging.Logger:
    """Configure the ``label_proof`` logger.

    Args:
        level: minimum log level.
        json_file: optional path of a JSON-lines log file.
        console: log to stderr.
        use_colors: ANSI colors on the console.

    Returns:
        The package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(ConsoleFormatter(use_colors=use_colors))
        logger.addHandler(console_handler)

    if json_file:
        json_handler = logging.FileHandler(Path(json_file), encoding='utf-8')
        json_handler.setLevel(level)
        json_handler.setFormatter(JSONFormatter())
        logger.addHandler(json_handler)

    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass ``__name__``)."""
    return logging.getLogger(name)


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    **extra_fields: Any
) -> Iterator[Dict[str, Any]]:
    """Log start, completion (with elapsed seconds) or failure of a block.

    Example:
        with log_timing(logger, "offset", label_type="Rolls"):
            run_macro_with_retry(host, "Rolls", "Offset")

    Yields:
        dict whose entries are added to the completion record.
    """
    info: Dict[str, Any] = {}
    start = time.perf_counter()
    logger.log(level, "Starting: %s", operation, extra={
        "event": "start", "operation": operation, **extra_fields,
    })
    try:
        yield info
    except Exception as e:
        elapsed = time.perf_counter() - start
        logger.error("Failed: %s (%.3fs) - %s", operation, elapsed, e, extra={
            "event": "error",
            "operation": operation,
            "elapsed_seconds": elapsed,
            "error": str(e),
            **extra_fields,
        })
        raise
    elapsed = time.perf_counter() - start
    logger.log(level, "Completed: %s (%.3fs)", operation, elapsed, extra={
        "event": "complete",
        "operation": operation,
        "elapsed_seconds": elapsed,
        **extra_fields,
        **info,
    })


class _ContextFilter(logging.Filter):
    def __init__(self, fields: Dict[str, Any]):
        super().__init__()
        self.fields = fields

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in self.fields.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class LogContext:
    """Add fields to every package log record inside a ``with`` block.

    The filter is attached to the package logger's handlers, so records
    from every ``label_proof.*`` module pick the fields up. Nested
    contexts merge with the enclosing one and the inner value wins for a
    shared key; fields passed through ``extra`` win over both.

    Example:
        with LogContext(proof="LabelProof", mode="Make"):
            workflow.run(request)
    """

    _current: Optional['LogContext'] = None

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous: Optional['LogContext'] = None
        self._filter = _ContextFilter(fields)
        self._handlers = []

    def __enter__(self) -> 'LogContext':
        previous = LogContext._current
        self._previous = previous
        LogContext._current = self
        inherited = previous._filter.fields if previous is not None else {}
        self._filter = _ContextFilter({**inherited, **self.fields})
        if previous is not None:
            previous._detach()
        self._handlers = list(logging.getLogger(PACKAGE_LOGGER).handlers)
        self._attach()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._detach()
        self._handlers = []
        LogContext._current = self._previous
        if self._previous is not None:
            self._previous._attach()

    # Only the innermost context's filter is on the handlers at a time.
    def _attach(self) -> None:
        for handler in self._handlers:
            handler.addFilter(self._filter)

    def _detach(self) -> None:
        for handler in self._handlers:
            handler.removeFilter(self._filter)

    @classmethod
    def current(cls) -> Optional['LogContext']:
        return cls._current
