from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from trackdash.config import POPULARITY_MAX, POPULARITY_MIN


class FilterCriteriaModel(BaseModel):
    search: str = ""
    genre: Optional[str] = None
    popularity_min: float = POPULARITY_MIN
    popularity_max: float = POPULARITY_MAX


class ColumnModel(BaseModel):
    field: str
    header: str


class MetaGenresResponse(BaseModel):
    genres: List[str]


class MetaColumnsResponse(BaseModel):
    columns: List[ColumnModel]

