from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from healthdash.filters import DashboardFilters
from healthdash.indicators import IndicatorSpec


def compute_debug(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    combined: pd.DataFrame = ctx.get("combined", pd.DataFrame())
    indicators: Dict[str, IndicatorSpec] = ctx.get("indicators", {}) or {}
    payload = {
        "filters": asdict(filters),
        "files": list(ctx.get("files", []) or []),
        "row_counts": {
            "demographics_rows": int(len(ctx.get("demographics", pd.DataFrame()))),
            "economic_rows": int(len(ctx.get("economic", pd.DataFrame()))),
            "spending_rows": int(len(ctx.get("spending", pd.DataFrame()))),
            "combined_rows": int(len(combined)),
        },
        "duplicate_keys": int(ctx.get("duplicate_keys", 0) or 0),
        "year_coverage": [],
        "indicator_coverage": [],
    }

    if not combined.empty and {"time", "iso3"}.issubset(combined.columns):
        agg = {"rows": ("iso3", "size"), "countries": ("iso3", "nunique")}
        if "spending" in combined.columns:
            agg["with_spending"] = ("spending", "count")
        coverage = combined.groupby("time").agg(**agg).reset_index()
        payload["year_coverage"] = coverage.to_dict(orient="records")

    payload["indicator_coverage"] = [
        {
            "indicator": spec.column,
            "label": spec.label,
            "source": spec.source,
            "non_missing": int(spec.values(combined).notna().sum()),
        }
        for spec in indicators.values()
    ]
    return payload
