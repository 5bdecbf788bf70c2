from __future__ import annotations

import logging
from typing import Iterable, List

import numpy as np
import pandas as pd

from trackdash.config import ID_COLUMN, POPULARITY_COLUMN, REQUIRED_COLUMNS
from trackdash.errors import EmptyDatasetError, InvalidDataError


logger = logging.getLogger(__name__)

MAX_REPORTED_VALUES = 5


def missing_columns(df: pd.DataFrame, required: Iterable[str] = REQUIRED_COLUMNS) -> List[str]:
    return [c for c in required if c not in df.columns]


def coerce_popularity(values: pd.Series) -> pd.Series:
    """Parse popularity text as float; unparseable and non-finite values become NaN."""
    out = pd.to_numeric(values.astype(str).str.strip(), errors="coerce").astype(float)
    return out.where(np.isfinite(out))


def normalize_rows(records: pd.DataFrame) -> pd.DataFrame:
    """Turn raw CSV records into dashboard rows.

    Adds the synthetic ``id`` column (0-based, source order) and replaces the
    popularity text with its number. A single bad popularity value rejects the
    whole dataset: callers never receive a partial row set.
    """
    if records.empty:
        raise EmptyDatasetError("Dataset has no data rows.")

    missing = missing_columns(records)
    if missing:
        raise InvalidDataError(f"Dataset is missing required columns: {', '.join(missing)}")

    rows = records.reset_index(drop=True).copy()
    if ID_COLUMN in rows.columns:
        rows = rows.drop(columns=[ID_COLUMN])
    rows.insert(0, ID_COLUMN, np.arange(len(rows), dtype=int))

    popularity = coerce_popularity(rows[POPULARITY_COLUMN])
    bad = popularity.isna()
    if bad.any():
        bad_rows = rows.loc[bad, [ID_COLUMN, POPULARITY_COLUMN]].head(MAX_REPORTED_VALUES)
        samples = ", ".join(f"row {int(r[ID_COLUMN])}: {r[POPULARITY_COLUMN]!r}" for _, r in bad_rows.iterrows())
        raise InvalidDataError(
            f"Dataset is malformed: {int(bad.sum())} row(s) have a non-numeric {POPULARITY_COLUMN} ({samples})"
        )

    rows[POPULARITY_COLUMN] = popularity
    logger.info("Normalized %d rows", len(rows))
    return rows
