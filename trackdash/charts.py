from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

from trackdash.config import GENRE_COLUMN, POPULARITY_COLUMN

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def popularity_histogram(rows: pd.DataFrame, bins: int = 20) -> alt.Chart:
    return (
        alt.Chart(rows[[POPULARITY_COLUMN]])
        .mark_bar()
        .encode(
            x=alt.X(f"{POPULARITY_COLUMN}:Q", bin=alt.Bin(maxbins=bins), title="Popularity"),
            y=alt.Y("count():Q", title="Tracks"),
            tooltip=[alt.Tooltip("count():Q", title="Tracks")],
        )
    )


def genre_bar(genre_counts: pd.DataFrame) -> alt.Chart:
    return (
        alt.Chart(genre_counts)
        .mark_bar()
        .encode(
            x=alt.X("tracks:Q", title="Tracks"),
            y=alt.Y(f"{GENRE_COLUMN}:N", sort="-x", title="Genre"),
            tooltip=[alt.Tooltip(f"{GENRE_COLUMN}:N", title="Genre"), alt.Tooltip("tracks:Q", title="Tracks")],
        )
    )
