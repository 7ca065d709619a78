"""
HydroFlow Calculator V1.0
Exporter Module

Main controller that turns the application log into one export file.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Union

from .config import ExportConfig, EMPTY_EXPORT_NOTICE, EXPORT_SCOPES
from .deduplicator import remove_duplicate_calculations
from .log_store import AppLog, LogEntry
from .reporter import generate_txt_content, generate_csv_content, generate_xlsx_rows
from .segmenter import CalculationRecord, extract_calculations
from .sinks import FileSink, SpreadsheetSink

logger = logging.getLogger(__name__)

GENERATORS = {
    'txt': generate_txt_content,
    'csv': generate_csv_content,
    'xlsx': generate_xlsx_rows,
}


# ================= EXPORT ARTIFACT =================

@dataclass(frozen=True)
class ExportArtifact:
    """Generated export; content is text, or a row matrix for xlsx."""
    filename: str
    export_format: str
    media_type: str
    content: Union[str, List[List[Any]]]


def select_calculations(calculations: List[CalculationRecord], config: ExportConfig) -> List[CalculationRecord]:
    """
    Apply the export scope.

    "last" returns the most recent calculation as logged. Any other scope
    returns all calculations with duplicates removed.
    """
    if not calculations:
        return []

    if config.scope not in EXPORT_SCOPES:
        logger.warning(f"Unknown export scope '{config.scope}', exporting all calculations")

    if not config.deduplicate:
        return [calculations[-1]]

    unique = remove_duplicate_calculations(calculations)
    if len(unique) < len(calculations):
        logger.info(f"Export: {len(calculations)} calculations found, "
                    f"{len(unique)} unique calculations will be exported")
    return unique


def build_export(entries: Iterable[LogEntry], config: ExportConfig) -> Optional[ExportArtifact]:
    """
    Generate the export content for a log.

    Args:
        entries: Log entries in chronological order
        config: Scope and format of this export

    Returns:
        ExportArtifact, or None if the log holds no calculations
    """
    calculations = extract_calculations(entries)
    if not calculations:
        return None

    for index, calc in enumerate(calculations, start=1):
        logger.debug(f"Calculation {index} [{calc.timestamp}]: {len(calc.levels)} levels, "
                     f"chart points: {calc.point_count or '-'}")

    selected = select_calculations(calculations, config)
    export_format = config.resolved_format
    if export_format != config.export_format:
        logger.warning(f"Unknown export format '{config.export_format}', falling back to {export_format}")
    content = GENERATORS[export_format](selected)

    return ExportArtifact(
        filename=config.filename,
        export_format=export_format,
        media_type=config.media_type,
        content=content,
    )


# ================= MAIN CONTROLLER =================

class HydroFlowExporter:
    """Facade that reads the log, builds the export and hands it to a sink."""

    def __init__(self, app_log: AppLog, output_dir: Union[str, Path],
                 notice_callback: Optional[Callable[[str], None]] = None):
        """
        Initialize HydroFlowExporter.

        Args:
            app_log: Log to export from (read only)
            output_dir: Folder that receives export files
            notice_callback: Function(message) used to tell the user there was nothing to export
        """
        self.app_log = app_log
        self.output_dir = Path(output_dir)
        self.notice_callback = notice_callback

    def set_output_dir(self, output_dir: Union[str, Path]) -> None:
        self.output_dir = Path(output_dir)

    def _notify(self, message: str) -> None:
        if self.notice_callback:
            self.notice_callback(message)

    def export(self, config: ExportConfig) -> Optional[Path]:
        """
        Run one export.

        Args:
            config: Scope and format of this export

        Returns:
            Path of the written file, or None if there was nothing to export

        Raises:
            ExportError: If the sink fails to write the file
        """
        logger.info(f"Exporting logs: scope={config.scope}, format={config.export_format}")
        artifact = build_export(self.app_log.entries(), config)

        if artifact is None:
            logger.warning("No calculations found in log, nothing exported")
            self._notify(EMPTY_EXPORT_NOTICE)
            return None

        if artifact.export_format == 'xlsx':
            sink = SpreadsheetSink(self.output_dir, config.sheet_name, config.column_width)
            return sink.save(artifact.content, artifact.filename)

        return FileSink(self.output_dir).save(artifact.content, artifact.filename, artifact.media_type)
