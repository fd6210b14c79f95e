"""
Unit tests for logging setup.

Tests credential masking and the JSON-lines log file.
"""

import logging
from pathlib import Path

import orjson

from gatewayarb.telemetry.logger import REDACTED, AsyncLogger, JsonLineFormatter, SecretFilter


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("gatewayarb.test", logging.INFO, __file__, 1, msg, args, None)


class TestSecretFilter:
    """Tests for SecretFilter."""

    def test_masks_secret(self) -> None:
        """Test that a secret in the formatted message is replaced."""
        secret = "4vJ9JU1bJJE96FWSJKvHsmmFADCg4gpZQff4P3bkLKi"
        record = _record("Loaded key %s for wallet", secret)

        assert SecretFilter([secret]).filter(record)
        assert record.getMessage() == f"Loaded key {REDACTED} for wallet"

    def test_leaves_other_messages(self) -> None:
        """Test that unrelated records keep their arguments."""
        record = _record("Scan complete in %dms", 120)

        SecretFilter(["some-long-secret"]).filter(record)

        assert record.args == (120,)
        assert record.getMessage() == "Scan complete in 120ms"

    def test_short_values_ignored(self) -> None:
        """Test that empty or short values never mask text."""
        record = _record("rpc ok")

        SecretFilter(["", "ok"]).filter(record)

        assert record.getMessage() == "rpc ok"


class TestJsonLineFormatter:
    """Tests for JsonLineFormatter."""

    def test_fields(self) -> None:
        """Test the JSON object written per record."""
        line = JsonLineFormatter().format(_record("Landed %s via %s", "5sig", "jito"))
        entry = orjson.loads(line)

        assert entry["level"] == "INFO"
        assert entry["logger"] == "gatewayarb.test"
        assert entry["message"] == "Landed 5sig via jito"
        assert isinstance(entry["ts"], int)


class TestAsyncLogger:
    """Tests for AsyncLogger."""

    def test_file_output_masked(self, tmp_path: Path) -> None:
        """Test that queued records reach the file without secrets."""
        log_file = tmp_path / "logs" / "bot.jsonl"
        secret = "relay-api-key-0123456789"

        with AsyncLogger("gatewayarb.filetest", log_file=log_file, secrets=[secret]) as async_logger:
            async_logger.logger.info(f"Using key {secret}")
            async_logger.logger.debug("debug reaches the file")

        lines = [orjson.loads(line) for line in log_file.read_text().splitlines()]
        messages = [entry["message"] for entry in lines]
        assert messages == [f"Using key {REDACTED}", "debug reaches the file"]

    def test_stop_detaches(self) -> None:
        """Test that stopping removes the queue handler."""
        async_logger = AsyncLogger("gatewayarb.stoptest")
        async_logger.start()
        async_logger.stop()

        assert async_logger.logger.handlers == []
