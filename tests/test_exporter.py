import logging

import pandas as pd
import pytest

import hydroflow.exporter as exporter_module
from hydroflow.config import ExportConfig, EMPTY_EXPORT_NOTICE, XLSX_HEADERS
from hydroflow.exporter import HydroFlowExporter, build_export
from hydroflow.log_store import AppLog

from log_samples import calculation_lines, level, to_entries


def _duplicated_log():
    first = calculation_lines()
    # same calculation logged again, levels in a different order
    second = calculation_lines(levels=list(reversed(calculation_lines()[2:5])))
    return to_entries(first + second)


def _fill(app_log, entries):
    for entry in entries:
        app_log.append(entry.message, timestamp=entry.timestamp)


def test_last_scope_exports_final_calculation_verbatim():
    artifact = build_export(_duplicated_log(), ExportConfig(scope="last", export_format="txt"))

    assert artifact.filename == "hydroflow_export_last.txt"
    assert artifact.media_type == "text/plain"
    assert artifact.content.count("Výpočet") == 1
    assert "Čas: [10:00:06]" in artifact.content
    # reversed level order of the second run is kept
    assert artifact.content.index("Level 30cm") < artifact.content.index("Level 10cm")


def test_all_scope_exports_one_copy_of_duplicates():
    artifact = build_export(_duplicated_log(), ExportConfig(scope="all", export_format="csv"))

    assert artifact.filename == "hydroflow_export_all.csv"
    assert artifact.media_type == "text/csv"
    assert len(artifact.content.splitlines()) == 1 + 3


def test_last_scope_never_deduplicates(monkeypatch):
    def fail(_calculations):
        raise AssertionError("deduplication must not run for the last scope")

    monkeypatch.setattr(exporter_module, "remove_duplicate_calculations", fail)
    artifact = build_export(_duplicated_log(), ExportConfig(scope="last", export_format="csv"))
    assert artifact is not None


def test_all_scope_always_deduplicates(monkeypatch):
    calls = []

    def record(calculations):
        calls.append(len(calculations))
        return list(calculations)

    monkeypatch.setattr(exporter_module, "remove_duplicate_calculations", record)
    build_export(to_entries(calculation_lines()), ExportConfig(scope="all"))
    assert calls == [1]


def test_unknown_format_falls_back_to_text():
    artifact = build_export(to_entries(calculation_lines()), ExportConfig(scope="all", export_format="pdf"))

    assert artifact.export_format == "txt"
    assert artifact.filename == "hydroflow_export_all.txt"
    assert artifact.content.startswith("HydroFlow Calculator - Export dat")


def test_unknown_scope_warns_once_in_selection(caplog):
    config = ExportConfig(scope="weekly", export_format="txt")

    with caplog.at_level(logging.WARNING):
        assert config.deduplicate is True
        assert caplog.records == []

        artifact = build_export(_duplicated_log(), config)

    assert artifact.filename == "hydroflow_export_weekly.txt"
    assert artifact.content.count("Výpočet") == 1
    warnings = [r for r in caplog.records if r.name == "hydroflow.exporter"]
    assert len(warnings) == 1
    assert "Unknown export scope 'weekly'" in warnings[0].getMessage()


def test_xlsx_artifact_is_row_matrix():
    artifact = build_export(to_entries(calculation_lines()), ExportConfig(scope="all", export_format="xlsx"))

    assert artifact.filename == "hydroflow_export_all.xlsx"
    assert artifact.content[0] == list(XLSX_HEADERS)
    assert len(artifact.content) == 4


def test_empty_log_builds_nothing():
    entries = to_entries(["App started", level(10, "0.1", "1.0")])
    assert build_export(entries, ExportConfig()) is None


def test_exporter_notifies_on_empty_log(tmp_path):
    notices = []
    exporter = HydroFlowExporter(AppLog(), tmp_path, notices.append)

    assert exporter.export(ExportConfig(scope="all", export_format="csv")) is None
    assert notices == [EMPTY_EXPORT_NOTICE]
    assert list(tmp_path.iterdir()) == []


def test_exporter_writes_text_file(tmp_path):
    app_log = AppLog()
    _fill(app_log, to_entries(calculation_lines()))
    exporter = HydroFlowExporter(app_log, tmp_path)

    path = exporter.export(ExportConfig(scope="last", export_format="csv"))

    assert path == tmp_path / "hydroflow_export_last.csv"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4


def test_exporter_writes_workbook(tmp_path):
    app_log = AppLog()
    _fill(app_log, _duplicated_log())
    exporter = HydroFlowExporter(app_log, tmp_path / "out")

    path = exporter.export(ExportConfig(scope="all", export_format="xlsx"))

    assert path.name == "hydroflow_export_all.xlsx"
    df = pd.read_excel(path, sheet_name="HydroFlow Data")
    assert list(df.columns) == list(XLSX_HEADERS)
    assert len(df) == 3
    assert df["Úroveň (cm)"].tolist() == [10, 20, 30]


def test_exporter_does_not_modify_log(tmp_path):
    app_log = AppLog()
    _fill(app_log, _duplicated_log())
    before = app_log.entries()

    HydroFlowExporter(app_log, tmp_path).export(ExportConfig(scope="all"))

    assert app_log.entries() == before


@pytest.mark.parametrize("scope", ["last", "all"])
def test_filename_follows_scope(scope):
    artifact = build_export(to_entries(calculation_lines()), ExportConfig(scope=scope, export_format="txt"))
    assert artifact.filename == f"hydroflow_export_{scope}.txt"
