"""
HydroFlow Calculator V1.0
Log Store Module

Ordered application log that calculation messages are appended to, plus file persistence.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%H:%M:%S"
LOG_LINE_RE = re.compile(r'^\[(?P<timestamp>[^\]]*)\]\s?(?P<message>.*)$')


# ================= CUSTOM EXCEPTIONS =================

class LogFileError(Exception):
    """Raised when a log file cannot be read or written."""
    pass


# ================= LOG ENTRIES =================

@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    message: str


_ESCAPES = str.maketrans({'\\': '\\\\', '\n': '\\n', '\r': '\\r'})
_ESCAPE_RE = re.compile(r'\\(.)')
_UNESCAPES = {'n': '\n', 'r': '\r'}


def format_log_entry(entry: LogEntry) -> str:
    """Render an entry as a single "[timestamp] message" line; line breaks are escaped."""
    return f"[{entry.timestamp}] {entry.message.translate(_ESCAPES)}"


def parse_log_line(line: str) -> Optional[LogEntry]:
    """Parse a "[timestamp] message" line, or return None if it has no timestamp."""
    match = LOG_LINE_RE.match(line.rstrip('\r\n'))
    if not match:
        return None
    message = _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), match.group('message'))
    return LogEntry(timestamp=match.group('timestamp'), message=message)


class AppLog:
    """Append-only, chronologically ordered log of calculation messages."""

    def __init__(self):
        self._entries: List[LogEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries())

    def append(self, message: str, timestamp: Optional[str] = None) -> LogEntry:
        if timestamp is None:
            timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        entry = LogEntry(timestamp=timestamp, message=message)
        self._entries.append(entry)
        return entry

    def entries(self) -> Tuple[LogEntry, ...]:
        """Snapshot of the log; later appends do not affect it."""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def load_file(self, path: Union[str, Path]) -> int:
        """
        Append all entries from a log file.

        A line without a timestamp continues the message of the entry above it.

        Args:
            path: Text file with one "[timestamp] message" entry per line

        Returns:
            Number of entries appended

        Raises:
            LogFileError: If the file cannot be read
        """
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise LogFileError(f"Could not read log file {path.name}: {e}") from e

        loaded: List[LogEntry] = []
        for line_no, line in enumerate(text.split('\n'), start=1):
            line = line.rstrip('\r')
            if not line.strip():
                continue
            entry = parse_log_line(line)
            if entry is not None:
                loaded.append(entry)
            elif loaded:
                previous = loaded[-1]
                loaded[-1] = LogEntry(timestamp=previous.timestamp, message=f"{previous.message}\n{line}")
            else:
                logger.warning(f"Skipping line {line_no} in {path.name}: no timestamp")

        self._entries.extend(loaded)
        logger.info(f"✓ Loaded {len(loaded)} log entries from {path.name}")
        return len(loaded)

    def save_file(self, path: Union[str, Path]) -> Path:
        """
        Write the log to a text file.

        Raises:
            LogFileError: If the file cannot be written
        """
        path = Path(path)
        content = "".join(format_log_entry(entry) + "\n" for entry in self._entries)
        try:
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise LogFileError(f"Could not write log file {path.name}: {e}") from e

        logger.info(f"✓ Saved {len(self._entries)} log entries to {path.name}")
        return path


# ================= LOGGING BRIDGE =================

class AppLogHandler(logging.Handler):
    """Logging handler that appends records to an AppLog."""

    def __init__(self, app_log: AppLog):
        super().__init__()
        self.app_log = app_log

    def emit(self, record):
        try:
            timestamp = datetime.fromtimestamp(record.created).strftime(TIMESTAMP_FORMAT)
            self.app_log.append(record.getMessage(), timestamp=timestamp)
        except Exception:
            self.handleError(record)
