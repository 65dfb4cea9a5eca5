from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Optional

import pandas as pd

from healthdash.charts import scatter_chart, to_vega_spec
from healthdash.config import SPENDING_AXIS_TITLE
from healthdash.filters import DashboardFilters
from healthdash.indicators import IndicatorSpec
from healthdash.queries import correlation, correlation_text, country_name_column


def compute_health_spending(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Health expenditure vs the selected indicator, with their correlation.

    With `filters.average` set, each point is a country's mean over all years
    (grouped by iso3 and region) instead of a single year.
    """
    frame: pd.DataFrame = ctx.get("health_data", pd.DataFrame())
    indicators: Dict[str, IndicatorSpec] = ctx.get("indicators", {}) or {}
    indicator = filters.indicator
    spec: Optional[IndicatorSpec] = indicators.get(indicator)
    if spec is None:
        spec = IndicatorSpec(indicator, indicator)

    spending = frame["spending"] if "spending" in frame.columns else pd.Series(dtype=float)
    r = correlation(spending, spec.values(frame))

    chart = scatter_chart(
        frame,
        "spending",
        indicator,
        x_title=SPENDING_AXIS_TITLE,
        y_title=spec.label,
        name_column=country_name_column(frame.columns),
        log_x=True,
    )
    return {
        "filters": asdict(filters),
        "indicator": indicator,
        "label": spec.label,
        "average": filters.average,
        "year": None if filters.average else filters.health_year,
        "points": int(len(frame)),
        "correlation": r,
        "correlation_text": correlation_text(indicator, r),
        "chart": to_vega_spec(chart),
    }
