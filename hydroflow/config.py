"""
HydroFlow Calculator V1.0
Configuration Module

Holds log markers, report column layouts, export settings and user preference persistence.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)


# ================= LOG MARKERS =================

PARAMETER_MARKERS: Tuple[str, ...] = ('m = ', 'kóta hladiny = ', 'kóta přelivu = ')
CURVE_INFO_MARKERS: Tuple[str, ...] = ('Generating consumption curve:',)
LEVEL_MARKERS: Tuple[str, ...] = ('Level ', 'cm: h = ', 'm, Q = ')
END_MARKERS: Tuple[str, ...] = ('Chart generated with ', 'data points')

CALCULATION_LOGGER_NAME = "hydroflow.calculation"


# ================= REPORT LAYOUT =================

CSV_COLUMNS: Tuple[str, ...] = (
    'Calculation', 'Timestamp', 'm', 'Kota_Hladiny_m', 'Kota_Prelivu_m',
    'Sirka_b_m', 'Pocet_Piliru_n', 'Typ_Pilire', 'Eta', 'Range_cm',
    'Segment_cm', 'Level_cm', 'Height_h_m', 'Flow_Q_m3s'
)

XLSX_HEADERS: Tuple[str, ...] = (
    'Výpočet', 'Čas', 'Součinitel m', 'Kóta hladiny (m.n.m.)', 'Kóta přelivu (m.n.m.)',
    'Šířka b (m)', 'Počet pilířů n', 'Typ pilíře', 'Eta ξ', 'Rozsah (cm)',
    'Segment (cm)', 'Úroveň (cm)', 'Výška h (m)', 'Průtok Q (m³/s)'
)

TXT_TITLE = "HydroFlow Calculator - Export dat"
TXT_TITLE_RULE = "=" * 37
TXT_LEVELS_HEADING = "Úrovně hladiny a průtoky:"
TXT_LEVELS_RULE = "-" * 28
TXT_SECTION_SEPARATOR = "=" * 50


# ================= EXPORT OPTIONS =================

SCOPE_LAST = "last"
SCOPE_ALL = "all"
EXPORT_SCOPES: Tuple[str, ...] = (SCOPE_LAST, SCOPE_ALL)
SCOPE_LABELS = {
    SCOPE_LAST: "Poslední výpočet",
    SCOPE_ALL: "Všechny výpočty",
}

# format -> (extension, media type)
EXPORT_FORMATS: Dict[str, Tuple[str, str]] = {
    'txt': ('txt', 'text/plain'),
    'csv': ('csv', 'text/csv'),
    'xlsx': ('xlsx', 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'),
}
DEFAULT_EXPORT_FORMAT = 'txt'

EMPTY_EXPORT_NOTICE = "Žádné výpočty k exportu nenalezeny."


# ================= CONFIGURATION DATACLASSES =================

@dataclass(frozen=True)
class ExportConfig:
    """Immutable settings for a single export request."""
    scope: str = SCOPE_ALL
    export_format: str = DEFAULT_EXPORT_FORMAT
    filename_template: str = "hydroflow_export_{scope}.{extension}"
    sheet_name: str = "HydroFlow Data"
    column_width: int = 15

    @property
    def resolved_format(self) -> str:
        """Requested format, or plain text when the format is unknown."""
        return self.export_format if self.export_format in EXPORT_FORMATS else DEFAULT_EXPORT_FORMAT

    @property
    def deduplicate(self) -> bool:
        return self.scope != SCOPE_LAST

    @property
    def extension(self) -> str:
        return EXPORT_FORMATS[self.resolved_format][0]

    @property
    def media_type(self) -> str:
        return EXPORT_FORMATS[self.resolved_format][1]

    @property
    def filename(self) -> str:
        return self.filename_template.format(scope=self.scope, extension=self.extension)


# ================= CONFIG MANAGER =================

class ConfigManager:
    """Manages user preference persistence to JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to config.json. If None, uses default location.
        """
        if config_path is None:
            self.config_path = Path.home() / ".hydroflow" / "config.json"
        else:
            self.config_path = Path(config_path)

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def defaults() -> Dict[str, Any]:
        return {
            "export_format": DEFAULT_EXPORT_FORMAT,
            "output_folder": str(Path.cwd()),
            "last_log_file": "",
            "theme": "dark",
            "window_geometry": "1600x1200",
        }

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from JSON file.

        Returns:
            Dictionary with user preferences. Returns defaults if file doesn't exist or is corrupted.
        """
        defaults = self.defaults()

        if not self.config_path.exists():
            logger.info("No config file found, using defaults")
            return defaults

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            merged = defaults.copy()
            merged.update(user_config)

            logger.info(f"Loaded config from {self.config_path}")
            return merged

        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load config: {e}. Using defaults.")
            return defaults

    def save_config(self, config: Dict[str, Any]) -> None:
        """
        Save configuration to JSON file.

        Args:
            config: Dictionary with user preferences
        """
        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=2, ensure_ascii=False)

            logger.info(f"Saved config to {self.config_path}")

        except OSError as e:
            logger.error(f"Failed to save config: {e}")
