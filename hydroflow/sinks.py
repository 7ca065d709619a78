"""
HydroFlow Calculator V1.0
Sinks Module

Writes generated exports to the output folder.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence, Union

import pandas as pd

logger = logging.getLogger(__name__)


# ================= CUSTOM EXCEPTIONS =================

class ExportError(Exception):
    """Raised when an export file cannot be written."""
    pass


# ================= SINKS =================

class FileSink:
    """Saves text exports (TXT, CSV)."""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def save(self, content: str, filename: str, media_type: str) -> Path:
        """
        Write text content into the output folder.

        Args:
            content: Generated file content
            filename: Target file name
            media_type: Media type of the content, e.g. "text/csv"

        Returns:
            Path of the written file

        Raises:
            ExportError: If the file cannot be written
        """
        path = self.output_dir / filename
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        except OSError as e:
            raise ExportError(f"Could not write {filename}: {e}") from e

        logger.info(f"✓ Saved {media_type} export: {path}")
        return path


class SpreadsheetSink:
    """Builds and saves an XLSX workbook from a row matrix."""

    def __init__(self, output_dir: Union[str, Path], sheet_name: str = "HydroFlow Data",
                 column_width: int = 15):
        self.output_dir = Path(output_dir)
        self.sheet_name = sheet_name
        self.column_width = column_width

    def save(self, rows: Sequence[Sequence[Any]], filename: str) -> Path:
        """
        Write the matrix to a single-sheet workbook.

        Args:
            rows: Matrix whose first row holds the column headers
            filename: Target file name

        Returns:
            Path of the written workbook

        Raises:
            ExportError: If the workbook cannot be written
        """
        if not rows:
            raise ExportError("Spreadsheet export needs at least a header row")

        path = self.output_dir / filename
        df = pd.DataFrame([list(row) for row in rows[1:]], columns=list(rows[0]))

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with pd.ExcelWriter(path, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name=self.sheet_name, index=False)

                for sheet in writer.sheets.values():
                    for col in sheet.columns:
                        sheet.column_dimensions[col[0].column_letter].width = self.column_width
        except (OSError, ValueError) as e:
            raise ExportError(f"Could not write {filename}: {e}") from e

        logger.info(f"✓ Saved spreadsheet export: {path} ({len(df)} rows)")
        return path
