"""
HydroFlow Calculator V1.0
Reporter Module

Generates narrative text, CSV and spreadsheet row exports from calculation records.
"""
from __future__ import annotations

import csv
import io
import logging
from decimal import Decimal
from typing import Any, Iterator, List, Sequence

from .config import (
    CSV_COLUMNS,
    XLSX_HEADERS,
    TXT_TITLE,
    TXT_TITLE_RULE,
    TXT_LEVELS_HEADING,
    TXT_LEVELS_RULE,
    TXT_SECTION_SEPARATOR,
)
from .extractors import parse_parameters, parse_range_info, parse_level_data
from .segmenter import CalculationRecord

logger = logging.getLogger(__name__)


# ================= ROW FLATTENING =================

def _level_rows(calculations: Sequence[CalculationRecord]) -> Iterator[List[Any]]:
    """One row per level, with the calculation's parameters and range repeated."""
    for calc_index, calc in enumerate(calculations, start=1):
        params = parse_parameters(calc.parameters)
        range_info = parse_range_info(calc.consumption_curve_info)

        for level in calc.levels:
            level_data = parse_level_data(level.message)
            yield [
                calc_index, calc.timestamp, params.m, params.water_level_elevation,
                params.spillway_elevation, params.width, params.pier_count, params.pier_type,
                params.eta, range_info.range, range_info.segment,
                level_data.level, level_data.h, level_data.Q,
            ]


def _format_csv_cell(value: Any) -> str:
    """Plain decimal text for numbers: 200 not 200.0, 0.00005 not 5e-05."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        text = format(Decimal(repr(value)), "f")
        return text.rstrip("0").rstrip(".") if "." in text else text
    return str(value)


# ================= GENERATORS =================

def generate_txt_content(calculations: Sequence[CalculationRecord]) -> str:
    """
    Human-readable dump of every calculation.

    Args:
        calculations: Records to export

    Returns:
        Text with a banner followed by one section per calculation
    """
    lines = [TXT_TITLE, TXT_TITLE_RULE, '']

    for index, calc in enumerate(calculations, start=1):
        lines.append(f"Výpočet {index}:")
        lines.append(f"Čas: [{calc.timestamp}]")
        lines.append(calc.parameters)
        if calc.consumption_curve_info:
            lines.append(calc.consumption_curve_info)
        lines.extend(['', TXT_LEVELS_HEADING, TXT_LEVELS_RULE])
        lines.extend(level.message for level in calc.levels)
        if calc.end_message:
            lines.extend(['', calc.end_message])
        lines.extend(['', TXT_SECTION_SEPARATOR, ''])

    return '\n'.join(lines) + '\n'


def generate_csv_content(calculations: Sequence[CalculationRecord]) -> str:
    """Flattened CSV with one row per level entry."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(CSV_COLUMNS)
    for row in _level_rows(calculations):
        writer.writerow([_format_csv_cell(value) for value in row])
    return buffer.getvalue()


def generate_xlsx_rows(calculations: Sequence[CalculationRecord]) -> List[List[Any]]:
    """Flattened rows of typed cells for the spreadsheet sink; the first row holds the headers."""
    rows: List[List[Any]] = [list(XLSX_HEADERS)]
    rows.extend(_level_rows(calculations))
    logger.debug(f"Built spreadsheet matrix with {len(rows) - 1} data rows")
    return rows
