from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

import pandas as pd

from trackdash.config import (
    ARTIST_COLUMN,
    GENRE_COLUMN,
    POPULARITY_COLUMN,
    POPULARITY_MAX,
    POPULARITY_MIN,
    TRACK_COLUMN,
)


logger = logging.getLogger(__name__)

ALL_GENRES = "All"


@dataclass(frozen=True)
class FilterCriteria:
    search: str = ""
    genre: Optional[str] = None
    popularity_min: float = POPULARITY_MIN
    popularity_max: float = POPULARITY_MAX


def _as_float(value: object, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if out != out:  # NaN
        return default
    return out


def normalize_filters(raw: dict) -> FilterCriteria:
    search = raw.get("search")
    search = "" if search is None else str(search)

    genre = raw.get("genre")
    genre = None if genre in (None, "", ALL_GENRES) else str(genre)

    lo = _as_float(raw.get("popularity_min"), POPULARITY_MIN)
    hi = _as_float(raw.get("popularity_max"), POPULARITY_MAX)
    return FilterCriteria(search=search, genre=genre, popularity_min=lo, popularity_max=hi)


def _text_column(rows: pd.DataFrame, col: str) -> pd.Series:
    if col not in rows.columns:
        return pd.Series("", index=rows.index, dtype=object)
    return rows[col].fillna("").astype(str)


def apply_filters(rows: pd.DataFrame, criteria: FilterCriteria) -> pd.DataFrame:
    """Return the rows matching every criterion, in source order.

    Search is a case-insensitive literal substring match on track name or
    artist; genre is an exact match; popularity bounds are inclusive.
    """
    if rows.empty:
        return rows.copy()

    mask = pd.Series(True, index=rows.index)

    if criteria.search:
        q = criteria.search.lower()
        mask &= _text_column(rows, TRACK_COLUMN).str.lower().str.contains(q, regex=False) | _text_column(
            rows, ARTIST_COLUMN
        ).str.lower().str.contains(q, regex=False)

    if criteria.genre is not None:
        mask &= _text_column(rows, GENRE_COLUMN) == criteria.genre

    popularity = rows[POPULARITY_COLUMN]
    mask &= (popularity >= criteria.popularity_min) & (popularity <= criteria.popularity_max)

    return rows[mask].copy()


def genre_options(rows: pd.DataFrame) -> List[str]:
    if rows.empty or GENRE_COLUMN not in rows.columns:
        return []
    return sorted(rows[GENRE_COLUMN].fillna("").astype(str).unique().tolist())


class FilterEngine:
    """Recompute the visible rows only when the rows or the criteria change."""

    def __init__(self) -> None:
        self._key: Optional[Tuple[int, FilterCriteria]] = None
        self._rows: Optional[pd.DataFrame] = None
        self._result: Optional[pd.DataFrame] = None
        self.recomputations = 0

    def visible(self, rows: pd.DataFrame, criteria: FilterCriteria) -> pd.DataFrame:
        key = (id(rows), criteria)
        if self._result is not None and self._key == key and self._rows is rows:
            return self._result
        self._result = apply_filters(rows, criteria)
        self._rows = rows
        self._key = key
        self.recomputations += 1
        logger.debug("Filtered %d -> %d rows for %s", len(rows), len(self._result), criteria)
        return self._result
