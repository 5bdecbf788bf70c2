from __future__ import annotations

import asyncio
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import pandas as pd

from trackdash.config import DATA_PATH
from trackdash.filters import FilterCriteria, apply_filters, genre_options, normalize_filters
from trackdash.loader import Source, is_url, load_csv
from trackdash.normalize import normalize_rows


SourceSignature = Tuple[str, Optional[float]]


def source_signature(source: Source) -> SourceSignature:
    """Cache key for a source: local files include their mtime so edits trigger a reload."""
    if is_url(source):
        return (str(source), None)
    path = Path(source).resolve()
    mtime = path.stat().st_mtime if path.exists() else None
    return (str(path), mtime)


def build_data_context(source: Source, records: pd.DataFrame) -> Dict[str, object]:
    rows = normalize_rows(records)
    return {
        "source": str(source),
        "rows": rows,
        "genres": genre_options(rows),
        "columns": list(rows.columns),
    }


# ---------------- Public API (Streamlit parity + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(sig: SourceSignature) -> Dict[str, object]:
    source, _ = sig
    return build_data_context(source, load_csv(source))


def load_dashboard_data(source: Source = DATA_PATH) -> Dict[str, object]:
    return _load_dashboard_data_cached(source_signature(source))


async def load_dashboard_data_async(source: Source = DATA_PATH) -> Dict[str, object]:
    """Load in a worker thread so the event loop keeps serving while the CSV is fetched."""
    return await asyncio.to_thread(load_dashboard_data, source)


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()


def prepare_context(filters: Union[dict, FilterCriteria], data_ctx: Dict[str, object]) -> Dict[str, object]:
    rows: pd.DataFrame = data_ctx.get("rows", pd.DataFrame())
    filt = filters if isinstance(filters, FilterCriteria) else normalize_filters(filters)
    visible = apply_filters(rows, filt)
    return {
        "filters": filt,
        "visible_rows": visible,
        "total_rows": int(len(rows)),
        "visible_count": int(len(visible)),
        "genres": data_ctx.get("genres", []),
    }
