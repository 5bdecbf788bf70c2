from __future__ import annotations

import csv
import io

import logging

import pandas as pd

from trackdash.errors import ExportError
from trackdash.export import EXPORT_MIME, export_visible_rows, to_csv_bytes
from trackdash.filters import FilterCriteria, apply_filters
from trackdash.normalize import normalize_rows
from trackdash.notify import CollectingNotifier


def _parse(content: bytes) -> list:
    return list(csv.reader(io.StringIO(content.decode("utf-8"))))


def test_to_csv_bytes_omits_id_and_quotes_everything(rows: pd.DataFrame):
    content = to_csv_bytes(rows)
    lines = content.decode("utf-8").splitlines()
    assert lines[0] == '"track_name","artists","track_genre","popularity","tempo"'
    assert all(line.startswith('"') and line.endswith('"') for line in lines)
    parsed = _parse(content)
    assert len(parsed) == len(rows) + 1
    assert parsed[1] == ["I'm in Love", "The Band", "pop", "10", "120.1"]


def test_export_empty_selection_warns_and_produces_nothing(rows: pd.DataFrame):
    notifier = CollectingNotifier()
    visible = apply_filters(rows, FilterCriteria(search="no such track"))
    assert export_visible_rows(visible, notifier) is None
    assert [n.severity for n in notifier.notifications] == ["warning"]


def test_export_visible_rows_returns_file(rows: pd.DataFrame):
    notifier = CollectingNotifier()
    visible = apply_filters(rows, FilterCriteria(genre="pop"))
    exported = export_visible_rows(visible, notifier)
    assert exported is not None
    assert exported.filename == "spotify_filtered_data.csv"
    assert exported.mime == EXPORT_MIME
    assert exported.row_count == 2
    parsed = _parse(exported.content)
    assert "id" not in parsed[0]
    assert len(parsed) - 1 == len(visible)
    assert notifier.by_severity("success")


def test_export_reports_serialization_failure(rows: pd.DataFrame, monkeypatch):
    def boom(_visible):
        raise ExportError("disk on fire")

    monkeypatch.setattr("trackdash.export.to_csv_bytes", boom)
    notifier = CollectingNotifier()
    assert export_visible_rows(rows, notifier) is None
    errors = notifier.by_severity("error")
    assert len(errors) == 1
    assert "disk on fire" in errors[0].message


def test_export_custom_filename(rows: pd.DataFrame):
    exported = export_visible_rows(rows, CollectingNotifier(), filename="mine.csv")
    assert exported.filename == "mine.csv"


def test_to_csv_bytes_keeps_popularity_values_exact(records: pd.DataFrame):
    records = records.copy()
    records["popularity"] = ["1234567", "73.123456", "73", "0.1"]
    parsed = _parse(to_csv_bytes(normalize_rows(records)))
    assert [row[3] for row in parsed[1:]] == ["1234567", "73.123456", "73", "0.1"]


def test_export_without_notifier_logs(rows: pd.DataFrame, caplog):
    caplog.set_level(logging.INFO, logger="trackdash.notify")
    assert export_visible_rows(rows.iloc[0:0]) is None
    exported = export_visible_rows(rows)
    assert exported is not None and exported.row_count == len(rows)
    messages = [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "trackdash.notify"]
    assert (logging.WARNING, "No rows to export.") in messages
    assert (logging.INFO, "Exported 4 rows to spotify_filtered_data.csv.") in messages
