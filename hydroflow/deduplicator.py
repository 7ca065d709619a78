"""
HydroFlow Calculator V1.0
Deduplicator Module

Removes calculations that were logged more than once.
"""
from __future__ import annotations

import logging
from typing import List, Sequence, Set

from .extractors import level_index
from .segmenter import CalculationRecord

logger = logging.getLogger(__name__)


def calculation_signature(calculation: CalculationRecord) -> str:
    """
    Build a comparison key from parameters, curve info and level lines.

    Levels are sorted by their numeric level so that the same curve logged in a
    different order still matches. Lines without a readable level sort as 0.
    """
    signature = calculation.parameters + '|' + calculation.consumption_curve_info + '|'
    sorted_levels = sorted(calculation.levels, key=lambda level: level_index(level.message))
    for level in sorted_levels:
        signature += level.message + '|'
    return signature


def remove_duplicate_calculations(calculations: Sequence[CalculationRecord]) -> List[CalculationRecord]:
    """
    Keep the first occurrence of every distinct calculation.

    Args:
        calculations: Records in log order

    Returns:
        Unique records, in order of first appearance
    """
    unique: List[CalculationRecord] = []
    seen: Set[str] = set()

    for calculation in calculations:
        signature = calculation_signature(calculation)
        if signature not in seen:
            seen.add(signature)
            unique.append(calculation)

    removed = len(calculations) - len(unique)
    if removed:
        logger.info(f"Removed {removed} duplicate calculations")
    return unique
