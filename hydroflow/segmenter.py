"""
HydroFlow Calculator V1.0
Segmenter Module

Groups the ordered application log into per-calculation records.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .extractors import Field, LineKind, classify_line, parse_point_count
from .log_store import LogEntry

logger = logging.getLogger(__name__)


# ================= RECORDS =================

@dataclass(frozen=True)
class LevelEntry:
    message: str
    timestamp: str


@dataclass
class CalculationRecord:
    """One calculation run: a parameters line, optional curve info, level rows and closing line."""
    timestamp: str
    parameters: str
    consumption_curve_info: str = ''
    levels: List[LevelEntry] = field(default_factory=list)
    end_message: Optional[str] = None

    @property
    def point_count(self) -> Field:
        return parse_point_count(self.end_message or '')


# ================= SEGMENTER =================

class CalculationSegmenter:
    """
    Two-state scanner over log entries.

    The segmenter is either idle (``current is None``) or open, collecting lines
    into ``current``. Transitions:

    - parameters line: flush the open record if any, then open a new one
    - curve-info line (open only): replace the curve description
    - level line (open only): append a level entry
    - end line (open only): store the closing message, flush, go idle
    - finish(): flush the open record if any
    """

    def __init__(self):
        self.calculations: List[CalculationRecord] = []
        self.current: Optional[CalculationRecord] = None

    @property
    def is_open(self) -> bool:
        return self.current is not None

    def feed(self, entry: LogEntry) -> None:
        kind = classify_line(entry.message)
        if kind is LineKind.PARAMETERS:
            self._open(entry)
        elif kind is None or self.current is None:
            return
        elif kind is LineKind.CURVE_INFO:
            self.current.consumption_curve_info = entry.message
        elif kind is LineKind.LEVEL:
            self.current.levels.append(LevelEntry(message=entry.message, timestamp=entry.timestamp))
        elif kind is LineKind.END:
            self.current.end_message = entry.message
            self._flush()

    def finish(self) -> List[CalculationRecord]:
        if self.is_open:
            logger.debug(f"Calculation from [{self.current.timestamp}] has no end line, keeping it")
        self._flush()
        return self.calculations

    def _open(self, entry: LogEntry) -> None:
        self._flush()
        self.current = CalculationRecord(timestamp=entry.timestamp, parameters=entry.message)

    def _flush(self) -> None:
        if self.current is not None:
            self.calculations.append(self.current)
            self.current = None


def extract_calculations(entries: Iterable[LogEntry]) -> List[CalculationRecord]:
    """
    Split an ordered log into calculation records.

    Args:
        entries: Log entries in chronological order

    Returns:
        Calculation records in log order
    """
    segmenter = CalculationSegmenter()
    for entry in entries:
        segmenter.feed(entry)
    return segmenter.finish()
