from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from trackdash.charts import genre_bar, popularity_histogram, to_vega_spec
from trackdash.config import GENRE_COLUMN, POPULARITY_COLUMN
from trackdash.filters import FilterCriteria


def genre_counts(rows: pd.DataFrame, top_n: int = 10) -> pd.DataFrame:
    if rows.empty or GENRE_COLUMN not in rows.columns:
        return pd.DataFrame(columns=[GENRE_COLUMN, "tracks"])
    counts = rows[GENRE_COLUMN].value_counts().head(top_n).rename_axis(GENRE_COLUMN).reset_index(name="tracks")
    return counts


def compute_summary(filters: FilterCriteria, ctx: Dict[str, Any], *, top_n: int = 10) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("visible_rows", pd.DataFrame())
    kpis = {
        "visible_tracks": int(len(df)),
        "total_tracks": int(ctx.get("total_rows", 0) or 0),
        "visible_genres": int(df[GENRE_COLUMN].nunique()) if not df.empty and GENRE_COLUMN in df.columns else 0,
        "avg_popularity": float(df[POPULARITY_COLUMN].mean()) if not df.empty else None,
    }
    if df.empty:
        return {"filters": asdict(filters), "kpis": kpis, "top_genres": [], "charts": {}}

    top = genre_counts(df, top_n=max(1, int(top_n)))
    charts = {
        "popularity_histogram": to_vega_spec(popularity_histogram(df)),
        "top_genres": to_vega_spec(genre_bar(top)),
    }
    return {
        "filters": asdict(filters),
        "kpis": kpis,
        "top_genres": top.to_dict(orient="records"),
        "charts": charts,
    }
