"""
HydroFlow Calculator V1.0
Extractors Module

Classifies log messages by their fixed markers and extracts typed fields from them.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .config import PARAMETER_MARKERS, CURVE_INFO_MARKERS, LEVEL_MARKERS, END_MARKERS

# Missing fields resolve to this value instead of a number.
EMPTY = ''

Field = Union[int, float, str]


# ================= LINE CLASSIFICATION =================

class LineKind(Enum):
    PARAMETERS = "parameters"
    CURVE_INFO = "curve_info"
    LEVEL = "level"
    END = "end"


@dataclass(frozen=True)
class LineRule:
    kind: LineKind
    markers: Tuple[str, ...]

    def matches(self, message: str) -> bool:
        return all(marker in message for marker in self.markers)


# Checked in order, first match wins.
LINE_RULES: Tuple[LineRule, ...] = (
    LineRule(LineKind.PARAMETERS, PARAMETER_MARKERS),
    LineRule(LineKind.CURVE_INFO, CURVE_INFO_MARKERS),
    LineRule(LineKind.LEVEL, LEVEL_MARKERS),
    LineRule(LineKind.END, END_MARKERS),
)


def classify_line(message: str) -> Optional[LineKind]:
    for rule in LINE_RULES:
        if rule.matches(message):
            return rule.kind
    return None


# ================= FIELD PATTERNS =================

M_RE = re.compile(r'm = ([\d.]+)')
WATER_LEVEL_RE = re.compile(r'kóta hladiny = ([\d.]+)')
SPILLWAY_RE = re.compile(r'kóta přelivu = ([\d.]+)')
WIDTH_RE = re.compile(r'b = ([\d.]+)')
PIER_COUNT_RE = re.compile(r'n = (\d+)')
PIER_TYPE_RE = re.compile(r'typ = ([^,]+)')
ETA_RE = re.compile(r'ξ = ([\d.]+)')

RANGE_RE = re.compile(r'rozsah = ([\d-]+)cm')
SEGMENT_RE = re.compile(r'segment = (\d+)cm')

LEVEL_RE = re.compile(r'Level (\d+)cm')
HEIGHT_RE = re.compile(r'h = ([\d.]+)m')
FLOW_RE = re.compile(r'Q = ([\d.]+) m³/s')

POINT_COUNT_RE = re.compile(r'Chart generated with (\d+) data points')

_NUMBER_PREFIX_RE = re.compile(r'\d+(?:\.\d*)?|\.\d+')


def _to_float(token: str) -> Field:
    """Read the leading decimal number of a token ("1.5." -> 1.5)."""
    match = _NUMBER_PREFIX_RE.match(token)
    return float(match.group(0)) if match else EMPTY


def _search_float(pattern: re.Pattern, text: str) -> Field:
    match = pattern.search(text)
    return _to_float(match.group(1)) if match else EMPTY


def _search_int(pattern: re.Pattern, text: str) -> Field:
    match = pattern.search(text)
    return int(match.group(1)) if match else EMPTY


# ================= PARSED RECORDS =================

@dataclass(frozen=True)
class ParsedParameters:
    m: Field = EMPTY
    water_level_elevation: Field = EMPTY
    spillway_elevation: Field = EMPTY
    width: Field = EMPTY
    pier_count: Field = EMPTY
    pier_type: Field = EMPTY
    eta: Field = EMPTY


@dataclass(frozen=True)
class ParsedRangeInfo:
    range: Field = EMPTY
    segment: Field = EMPTY


@dataclass(frozen=True)
class ParsedLevelData:
    level: Field = EMPTY
    h: Field = EMPTY
    Q: Field = EMPTY


# ================= EXTRACTORS =================

def parse_parameters(text: str) -> ParsedParameters:
    """
    Extract weir parameters from a parameters log line.

    Args:
        text: e.g. "m = 1.5, kóta hladiny = 200.0, kóta přelivu = 198.0, b = 10, n = 2, typ = oblý, ξ = 0.7"

    Returns:
        ParsedParameters with EMPTY for every marker not present
    """
    type_match = PIER_TYPE_RE.search(text)
    return ParsedParameters(
        m=_search_float(M_RE, text),
        water_level_elevation=_search_float(WATER_LEVEL_RE, text),
        spillway_elevation=_search_float(SPILLWAY_RE, text),
        width=_search_float(WIDTH_RE, text),
        pier_count=_search_int(PIER_COUNT_RE, text),
        pier_type=type_match.group(1).strip() if type_match else EMPTY,
        eta=_search_float(ETA_RE, text),
    )


def parse_range_info(text: str) -> ParsedRangeInfo:
    """Extract the level range ("0-300") and segment size from a curve-info line."""
    if not text:
        return ParsedRangeInfo()

    range_match = RANGE_RE.search(text)
    return ParsedRangeInfo(
        range=range_match.group(1) if range_match else EMPTY,
        segment=_search_int(SEGMENT_RE, text),
    )


def parse_level_data(text: str) -> ParsedLevelData:
    """Extract level (cm), head h (m) and flow Q (m³/s) from a level line."""
    return ParsedLevelData(
        level=_search_int(LEVEL_RE, text),
        h=_search_float(HEIGHT_RE, text),
        Q=_search_float(FLOW_RE, text),
    )


def level_index(text: str) -> int:
    """Numeric level of a level line, 0 when it cannot be read."""
    match = LEVEL_RE.search(text)
    return int(match.group(1)) if match else 0


def parse_point_count(text: str) -> Field:
    """Number of chart data points announced by an end line."""
    return _search_int(POINT_COUNT_RE, text)
