from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from api.schemas import MetaLevelsResponse, MetaRegionsResponse, SelectionModel
from edutrend.data import load_dashboard_data
from edutrend.filters import LEVELS, Selection, normalize_selection
from edutrend.metrics_debug import compute_debug
from edutrend.metrics_projection import compute_projection
from edutrend.pipeline import prepare_context


app = FastAPI(title="Education Completion Trend API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _selection_from_model(model: SelectionModel, *, available_regions: list[str]) -> Selection:
    raw = model.model_dump()
    return normalize_selection(raw, available_regions=available_regions)


def _json(data: object) -> JSONResponse:
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
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/regions", response_model=MetaRegionsResponse)
def meta_regions():
    try:
        data_ctx = load_dashboard_data()
        return _json({"regions": data_ctx.get("regions", []) or []})
    except Exception as exc:
        logger.exception("meta_regions failed")
        return _error(exc)


@app.get("/meta/levels", response_model=MetaLevelsResponse)
def meta_levels():
    return _json({"levels": list(LEVELS)})


@app.post("/projection")
def projection(selection: SelectionModel):
    try:
        data_ctx = load_dashboard_data()
        sel = _selection_from_model(selection, available_regions=data_ctx.get("regions", []))
        ctx = prepare_context(sel, data_ctx)
        return _json(compute_projection(sel, ctx))
    except Exception as exc:
        logger.exception("projection failed")
        return _error(exc)


@app.post("/debug")
def debug(selection: SelectionModel):
    try:
        data_ctx = load_dashboard_data()
        sel = _selection_from_model(selection, available_regions=data_ctx.get("regions", []))
        ctx = prepare_context(sel, data_ctx)
        return _json(compute_debug(sel, ctx))
    except Exception as exc:
        logger.exception("debug failed")
        return _error(exc)


@app.post("/export/{page}")
def export_page(page: str, selection: SelectionModel):
    data_ctx = load_dashboard_data()
    sel = _selection_from_model(selection, available_regions=data_ctx.get("regions", []))
    ctx = prepare_context(sel, data_ctx)

    filename = f"{page}.csv"
    if page == "projection":
        export_df = ctx["outcome"].display
    elif page == "dataset":
        export_df = ctx.get("dataset")
    else:
        export_df = pd.DataFrame()

    if export_df is None or not hasattr(export_df, "to_csv"):
        export_df = pd.DataFrame()
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
