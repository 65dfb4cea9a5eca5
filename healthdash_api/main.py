from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from healthdash.config import configure_logging
from healthdash.data import load_dashboard_data, prepare_context
from healthdash.filters import DashboardFilters, normalize_filters
from healthdash.views_debug import compute_debug
from healthdash.views_health import compute_health_spending
from healthdash.views_overview import compute_overview
from healthdash.views_wealth import compute_emissions, compute_wealth
from healthdash_api.schemas import (
    DashboardFiltersModel,
    IndicatorModel,
    MetaIndicatorsResponse,
    MetaYearsResponse,
)


configure_logging()
app = FastAPI(title="Health Spending Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: DashboardFiltersModel, *, indicators: list[str]) -> DashboardFilters:
    return normalize_filters(model.model_dump(), indicators=indicators)


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _finite(value: object) -> float | None:
    out = float(value)  # type: ignore[arg-type]
    return out if math.isfinite(out) else None


def _json(data: object) -> JSONResponse:
    """NaN, inf and pd.NA in payloads are sent as null."""
    encoders = {type(pd.NA): lambda _: None, np.integer: int, float: _finite, np.floating: _finite}
    return JSONResponse(content=jsonable_encoder(data, custom_encoder=encoders))


def _page_context(filters: DashboardFiltersModel) -> tuple[DashboardFilters, dict]:
    data_ctx = load_dashboard_data()
    f = _filters_from_model(filters, indicators=list(data_ctx.get("indicators", {})))
    return f, prepare_context(f, data_ctx)


@app.get("/meta/years")
def meta_years():
    try:
        data_ctx = load_dashboard_data()
        return _json(MetaYearsResponse(years=data_ctx.get("years", [])).model_dump())
    except Exception as exc:
        logger.exception("meta_years failed")
        return _error(exc)


@app.get("/meta/indicators")
def meta_indicators():
    try:
        data_ctx = load_dashboard_data()
        specs = data_ctx.get("indicators", {}) or {}
        response = MetaIndicatorsResponse(
            indicators=[IndicatorModel(column=s.column, label=s.label, source=s.source) for s in specs.values()]
        )
        return _json(response.model_dump())
    except Exception as exc:
        logger.exception("meta_indicators failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: DashboardFiltersModel):
    try:
        f, ctx = _page_context(filters)
        return _json(compute_overview(f, ctx))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/wealth")
def wealth(filters: DashboardFiltersModel):
    try:
        f, ctx = _page_context(filters)
        return _json(compute_wealth(f, ctx))
    except Exception as exc:
        logger.exception("wealth failed")
        return _error(exc)


@app.post("/emissions")
def emissions(filters: DashboardFiltersModel):
    try:
        f, ctx = _page_context(filters)
        return _json(compute_emissions(f, ctx))
    except Exception as exc:
        logger.exception("emissions failed")
        return _error(exc)


@app.post("/health-spending")
def health_spending(filters: DashboardFiltersModel):
    try:
        f, ctx = _page_context(filters)
        return _json(compute_health_spending(f, ctx))
    except Exception as exc:
        logger.exception("health_spending failed")
        return _error(exc)


@app.post("/debug")
def debug(filters: DashboardFiltersModel):
    try:
        f, ctx = _page_context(filters)
        return _json(compute_debug(f, ctx))
    except Exception as exc:
        logger.exception("debug failed")
        return _error(exc)


@app.post("/export/{page}")
def export_page(page: str, filters: DashboardFiltersModel):
    _, ctx = _page_context(filters)

    filename = f"{page}.csv"
    if page == "overview":
        export_df = ctx.get("combined")
    elif page == "wealth":
        export_df = ctx.get("wealth_year")
    elif page == "emissions":
        export_df = ctx.get("emissions_year")
    elif page in {"health", "health-spending"}:
        export_df = ctx.get("health_data")
        filename = "health_spending.csv"
    else:
        export_df = pd.DataFrame()

    if export_df is None or not hasattr(export_df, "to_csv"):
        export_df = pd.DataFrame()
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
