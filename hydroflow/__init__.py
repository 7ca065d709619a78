"""
HydroFlow Calculator V1.0
Package Initialization
"""

from .config import (
    ExportConfig,
    ConfigManager,
    EXPORT_FORMATS,
    EXPORT_SCOPES,
    CSV_COLUMNS,
    XLSX_HEADERS,
)

from .log_store import AppLog, AppLogHandler, LogEntry, LogFileError
from .segmenter import CalculationRecord, LevelEntry, CalculationSegmenter, extract_calculations
from .deduplicator import calculation_signature, remove_duplicate_calculations
from .sinks import FileSink, SpreadsheetSink, ExportError
from .exporter import HydroFlowExporter, ExportArtifact, build_export

__version__ = "1.0.0"
__all__ = [
    'ExportConfig',
    'ConfigManager',
    'AppLog',
    'AppLogHandler',
    'LogEntry',
    'LogFileError',
    'CalculationRecord',
    'LevelEntry',
    'CalculationSegmenter',
    'extract_calculations',
    'calculation_signature',
    'remove_duplicate_calculations',
    'FileSink',
    'SpreadsheetSink',
    'ExportError',
    'HydroFlowExporter',
    'ExportArtifact',
    'build_export',
    'EXPORT_FORMATS',
    'EXPORT_SCOPES',
    'CSV_COLUMNS',
    'XLSX_HEADERS',
]
