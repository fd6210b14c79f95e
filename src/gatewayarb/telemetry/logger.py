"""
Queue-based logging for the bot.

Console and file output are written by a listener thread so that I/O never
stalls the scan loop or a delivery race. Credentials are masked before any
handler sees a record, and the optional log file is written as JSON lines.
"""

import logging
import sys
from collections.abc import Iterable
from logging.handlers import QueueHandler, QueueListener
from pathlib import Path
from queue import Queue

import orjson

from gatewayarb.config.constants import LOG_DATE_FORMAT, LOG_FORMAT, MAX_LOG_QUEUE_SIZE


REDACTED = "***"

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("aiohttp", "asyncio", "urllib3", "hpack")


class SecretFilter(logging.Filter):
    """Replaces known secret values in log messages."""

    def __init__(self, secrets: Iterable[str]) -> None:
        super().__init__()
        # Short values would mask unrelated text
        self._secrets = tuple(s for s in secrets if s and len(s) >= 8)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True

        message = record.getMessage()
        masked = message
        for secret in self._secrets:
            masked = masked.replace(secret, REDACTED)

        if masked != message:
            record.msg = masked
            record.args = None
        return True


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": int(record.created * 1000),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return orjson.dumps(entry).decode()


class AsyncLogger:
    """
    Non-blocking logger for the bot.

    Records are put on a bounded queue by the calling coroutine and written
    by a background thread.
    """

    def __init__(
        self,
        name: str,
        level: int = logging.INFO,
        log_file: Path | None = None,
        secrets: Iterable[str] = (),
    ) -> None:
        """
        Initialize the logger.

        Args:
            name: Logger name.
            level: Console level.
            log_file: Optional JSON-lines file receiving every record.
            secrets: Values that must never reach an output.
        """
        self._level = level
        self._log_file = log_file
        self._queue: Queue[logging.LogRecord] = Queue(maxsize=MAX_LOG_QUEUE_SIZE)
        self._listener: QueueListener | None = None
        self._queue_handler: QueueHandler | None = None
        self._filter = SecretFilter(secrets)
        self._logger = logging.getLogger(name)

    def _handlers(self) -> list[logging.Handler]:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        console.setLevel(self._level)
        handlers: list[logging.Handler] = [console]

        if self._log_file:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self._log_file, encoding="utf-8")
            file_handler.setFormatter(JsonLineFormatter())
            file_handler.setLevel(logging.DEBUG)
            handlers.append(file_handler)

        return handlers

    def start(self) -> None:
        """Attach the queue handler and start the writer thread."""
        self._queue_handler = QueueHandler(self._queue)
        self._queue_handler.addFilter(self._filter)
        self._logger.addHandler(self._queue_handler)
        self._logger.setLevel(min(self._level, logging.DEBUG) if self._log_file else self._level)

        self._listener = QueueListener(self._queue, *self._handlers(), respect_handler_level=True)
        self._listener.start()

    def stop(self) -> None:
        """Flush pending records and detach."""
        if self._listener:
            self._listener.stop()
            self._listener = None
        if self._queue_handler:
            self._logger.removeHandler(self._queue_handler)
            self._queue_handler = None

    @property
    def logger(self) -> logging.Logger:
        """Get the underlying logger."""
        return self._logger

    def __enter__(self) -> "AsyncLogger":
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    secrets: Iterable[str] = (),
) -> AsyncLogger:
    """
    Route the package's logging through an AsyncLogger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional JSON-lines log file.
        secrets: Credential values to mask.

    Returns:
        Started AsyncLogger; call stop() on shutdown.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    async_logger = AsyncLogger(
        name="gatewayarb",
        level=numeric_level,
        log_file=log_file,
        secrets=secrets,
    )
    async_logger.start()

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return async_logger
