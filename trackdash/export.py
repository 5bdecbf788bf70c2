from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from trackdash.config import EXPORT_FILENAME, ID_COLUMN
from trackdash.errors import ExportError
from trackdash.notify import LoggingNotifier, Notifier


logger = logging.getLogger(__name__)

EXPORT_MIME = "text/csv"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    content: bytes
    row_count: int
    mime: str = EXPORT_MIME


def _format_number(value: object) -> object:
    # Integral floats keep their source text ("73", not "73.0"); others round-trip exactly.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return value


def to_csv_bytes(visible: pd.DataFrame) -> bytes:
    """Serialize rows as comma-delimited, fully quoted CSV without the synthetic id."""
    try:
        out = visible.drop(columns=[ID_COLUMN], errors="ignore")
        for col in out.select_dtypes(include="float").columns:
            out[col] = out[col].astype(object).map(_format_number)
        return out.to_csv(index=False, quoting=csv.QUOTE_ALL, lineterminator="\n").encode("utf-8")
    except (ValueError, TypeError, UnicodeError) as exc:
        raise ExportError(f"Could not serialize {len(visible)} rows: {exc}") from exc


def export_visible_rows(
    visible: pd.DataFrame, notifier: Optional[Notifier] = None, *, filename: str = EXPORT_FILENAME
) -> Optional[ExportFile]:
    if notifier is None:
        notifier = LoggingNotifier()
    if visible is None or visible.empty:
        notifier.warning("No rows to export.")
        return None
    try:
        content = to_csv_bytes(visible)
    except ExportError as exc:
        logger.exception("export failed")
        notifier.error(f"Export failed: {exc}")
        return None
    notifier.success(f"Exported {len(visible)} rows to {filename}.")
    return ExportFile(filename=filename, content=content, row_count=len(visible))
