from __future__ import annotations

import logging
import math
from dataclasses import asdict

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from trackdash.config import DATA_PATH, DEFAULT_PAGE_SIZE, ID_COLUMN, configure_logging
from trackdash.data import load_dashboard_data_async, prepare_context
from trackdash.errors import DatasetError
from trackdash.export import export_visible_rows
from trackdash.filters import FilterCriteria, normalize_filters
from trackdash.notify import CollectingNotifier
from trackdash.summary import compute_summary
from trackdash.table import DEFAULT_SORT, column_spec, paginate, sort_rows
from trackdash_api.schemas import FilterCriteriaModel, MetaColumnsResponse, MetaGenresResponse


configure_logging()
app = FastAPI(title="Track Dashboard API", version="0.1.0")
app.state.data_source = DATA_PATH
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: FilterCriteriaModel) -> FilterCriteria:
    return normalize_filters(model.model_dump())


def _json(data: object, status_code: int = 200) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        ),
    )


def _error(exc: Exception, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": str(exc), "type": type(exc).__name__})


async def _data_ctx() -> dict:
    return await load_dashboard_data_async(app.state.data_source)


@app.get("/meta/genres")
async def meta_genres():
    try:
        data_ctx = await _data_ctx()
        return _json(MetaGenresResponse(genres=data_ctx.get("genres", [])).model_dump())
    except DatasetError as exc:
        logger.exception("meta_genres: dataset unavailable")
        return _error(exc, 503)
    except Exception as exc:
        logger.exception("meta_genres failed")
        return _error(exc, 500)


@app.get("/meta/columns")
def meta_columns():
    return _json(MetaColumnsResponse(columns=column_spec()).model_dump())


@app.post("/tracks")
async def tracks(
    filters: FilterCriteriaModel,
    sort_by: str = Query(default=DEFAULT_SORT),
    descending: bool = Query(default=True),
    page: int = Query(default=0, ge=0),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE),
):
    try:
        data_ctx = await _data_ctx()
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        ordered = sort_rows(ctx["visible_rows"], by=sort_by, descending=descending)
        pg = paginate(ordered, page=page, page_size=page_size)
        return _json(
            {
                "filters": asdict(f),
                "rows": pg.rows.to_dict(orient="records"),
                "page": pg.page,
                "page_size": pg.page_size,
                "page_count": pg.page_count,
                "visible_count": ctx["visible_count"],
                "total_count": ctx["total_rows"],
            }
        )
    except DatasetError as exc:
        logger.exception("tracks: dataset unavailable")
        return _error(exc, 503)
    except ValueError as exc:
        return _error(exc, 422)
    except Exception as exc:
        logger.exception("tracks failed")
        return _error(exc, 500)


@app.post("/summary")
async def summary(filters: FilterCriteriaModel, top_n: int = Query(default=10, ge=1, le=50)):
    try:
        data_ctx = await _data_ctx()
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_summary(f, ctx, top_n=top_n))
    except DatasetError as exc:
        logger.exception("summary: dataset unavailable")
        return _error(exc, 503)
    except Exception as exc:
        logger.exception("summary failed")
        return _error(exc, 500)


@app.post("/export")
async def export(filters: FilterCriteriaModel):
    try:
        data_ctx = await _data_ctx()
    except DatasetError as exc:
        logger.exception("export: dataset unavailable")
        return _error(exc, 503)

    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        notifier = CollectingNotifier()
        export_file = export_visible_rows(ctx["visible_rows"], notifier)
    except Exception as exc:
        logger.exception("export failed")
        return _error(exc, 500)

    notifications = [asdict(n) for n in notifier.notifications]
    if export_file is None:
        status = 404 if ctx["visible_rows"].empty else 500
        return _json({"filters": asdict(f), "notifications": notifications}, status_code=status)

    logger.info("export: %d rows (%s column omitted)", export_file.row_count, ID_COLUMN)
    return Response(
        content=export_file.content,
        media_type=export_file.mime,
        headers={"Content-Disposition": f"attachment; filename={export_file.filename}"},
    )
