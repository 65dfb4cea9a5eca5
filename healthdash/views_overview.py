from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from healthdash.config import OVERVIEW_COLUMNS
from healthdash.filters import DashboardFilters
from healthdash.queries import columns_present, sample_rows


def _as_int(value: Any) -> Optional[int]:
    if value is None or pd.isna(value):
        return None
    try:
        return int(value)
    except Exception:
        return None


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    combined: pd.DataFrame = ctx.get("combined", pd.DataFrame())
    columns = columns_present(combined, OVERVIEW_COLUMNS)
    sample = sample_rows(combined, filters.sample_size, seed=filters.seed)[columns]

    years = combined["time"] if "time" in combined.columns else pd.Series(dtype="int64")
    countries = combined["iso3"].dropna().nunique() if "iso3" in combined.columns else 0
    return {
        "filters": asdict(filters),
        "columns": columns,
        "sample": sample.to_dict(orient="records"),
        "row_count": int(len(combined)),
        "country_count": int(countries),
        "year_min": _as_int(years.min()) if not years.empty else None,
        "year_max": _as_int(years.max()) if not years.empty else None,
    }
