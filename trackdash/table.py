from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List

import pandas as pd

from trackdash.config import (
    ARTIST_COLUMN,
    DEFAULT_PAGE_SIZE,
    GENRE_COLUMN,
    PAGE_SIZE_OPTIONS,
    POPULARITY_COLUMN,
    TRACK_COLUMN,
)


TABLE_COLUMNS: Dict[str, str] = {
    TRACK_COLUMN: "Track",
    ARTIST_COLUMN: "Artist",
    GENRE_COLUMN: "Genre",
    POPULARITY_COLUMN: "Popularity",
}

DEFAULT_SORT = POPULARITY_COLUMN


@dataclass(frozen=True)
class Page:
    rows: pd.DataFrame
    page: int
    page_size: int
    total_rows: int

    @property
    def page_count(self) -> int:
        return max(1, math.ceil(self.total_rows / self.page_size))


def column_spec() -> List[Dict[str, str]]:
    return [{"field": field, "header": header} for field, header in TABLE_COLUMNS.items()]


def sort_rows(rows: pd.DataFrame, by: str = DEFAULT_SORT, descending: bool = True) -> pd.DataFrame:
    if rows.empty or by not in rows.columns:
        return rows
    return rows.sort_values(by, ascending=not descending, kind="mergesort")


def paginate(rows: pd.DataFrame, page: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}, got {page_size}")
    total = len(rows)
    last_page = max(0, math.ceil(total / page_size) - 1)
    page = max(0, min(int(page), last_page))
    start = page * page_size
    return Page(rows=rows.iloc[start : start + page_size], page=page, page_size=page_size, total_rows=total)


def display_frame(rows: pd.DataFrame) -> pd.DataFrame:
    """Table view: the dashboard columns under their header labels."""
    cols = [c for c in TABLE_COLUMNS if c in rows.columns]
    return rows[cols].rename(columns=TABLE_COLUMNS)
