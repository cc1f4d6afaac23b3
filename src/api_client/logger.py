"""
Logging capability injected into the API client, plus concrete sinks.

The client only ever calls the four ApiLogger operations.  Sinks:
- NullLogger    default; discards everything
- StdlibLogger  forwards to the standard ``logging`` module
- RunLogger     prints timestamped lines and keeps entries for a summary
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@runtime_checkable
class ApiLogger(Protocol):
    """The logging operations the client depends on."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def debug(self, message: str) -> None: ...


class NullLogger:
    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str, exc: BaseException | None = None) -> None:
        pass

    def debug(self, message: str) -> None:
        pass


class StdlibLogger:
    """Adapter from ApiLogger to a ``logging.Logger``."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("src.api_client")

    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.logger.error(message, exc_info=exc)

    def debug(self, message: str) -> None:
        self.logger.debug(message)


# ---------------------------------------------------------------------------
# Run logger (console output for test sessions)
# ---------------------------------------------------------------------------

@dataclass
class LogEntry:
    level: str
    message: str
    exc: BaseException | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class RunLogger:
    """
    Console logger for a test session.

    Every call prints ``[HH:MM:SS.fff] [LEVEL] message`` and records the entry
    so a per-test summary can be printed at the end.
    """

    SEPARATOR = "=" * 80

    def __init__(self, stream=None):
        self.stream = stream
        self.entries: list[LogEntry] = []

    def _write(self, text: str) -> None:
        print(text, file=self.stream or sys.stdout)

    def _log(self, level: str, label: str, message: str, exc: BaseException | None = None) -> None:
        entry = LogEntry(level, message, exc)
        self.entries.append(entry)
        self._write(f"[{entry.timestamp:%H:%M:%S}.{entry.timestamp.microsecond // 1000:03d}] [{label}] {message}")

    def info(self, message: str) -> None:
        self._log("INFO", "INFO", message)

    def warning(self, message: str) -> None:
        self._log("WARNING", "WARN", message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log("ERROR", "ERROR", message, exc)
        if exc is not None:
            self._write(f"  Exception: {type(exc).__name__}: {exc}")

    def debug(self, message: str) -> None:
        self._log("DEBUG", "DEBUG", message)

    # ── Structured helpers ────────────────────────────────────────────────

    def log_api_request(self, method: str, endpoint: str, body: Any = None) -> None:
        message = f"API Request: {method} {endpoint}"
        if body is not None:
            message += f"\n  Body: {json.dumps(body, indent=2, ensure_ascii=False, default=str)}"
        self.info(message)

    def log_api_response(
        self,
        status_code: int,
        status_text: str,
        body: Any = None,
        duration_ms: float | None = None,
    ) -> None:
        message = f"API Response: {status_code} {status_text}"
        if duration_ms is not None:
            message += f" ({duration_ms:.0f}ms)"
        if body is not None:
            message += f"\n  Body: {json.dumps(body, indent=2, ensure_ascii=False, default=str)}"
        self.info(message)

    def log_test_start(self, test_name: str) -> None:
        self._write(self.SEPARATOR)
        self.info(f"TEST START: {test_name}")
        self._write(self.SEPARATOR)

    def log_test_end(self, test_name: str, passed: bool) -> None:
        self._write(self.SEPARATOR)
        if passed:
            self.info(f"TEST PASSED: {test_name}")
        else:
            self.error(f"TEST FAILED: {test_name}")
        self._write(self.SEPARATOR)

    def count(self, level: str) -> int:
        return sum(1 for e in self.entries if e.level == level)

    def get_log_summary(self) -> str:
        return (
            f"Total Logs: {len(self.entries)}\n"
            f"  INFO: {self.count('INFO')}\n"
            f"  WARN: {self.count('WARNING')}\n"
            f"  ERROR: {self.count('ERROR')}\n"
            f"  DEBUG: {self.count('DEBUG')}"
        )


# ---------------------------------------------------------------------------
# Root logger setup
# ---------------------------------------------------------------------------

def setup_logging(
    log_level: int = logging.INFO,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Path | str | None = None,
) -> None:
    """
    Configure the root logger with a console handler and an optional file.

    Existing root handlers are replaced so repeated calls do not duplicate
    output.

    Args:
        log_level: Minimum level (e.g. ``logging.DEBUG``).
        log_format: Format string for every handler.
        log_file: Optional path; parent directories are created.
    """
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    formatter = logging.Formatter(log_format)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(log_level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logging.getLogger(__name__).debug(
        "Logging configured. Level=%s", logging.getLevelName(log_level)
    )
