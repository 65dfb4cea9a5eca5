from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from healthdash.charts import scatter_chart, to_vega_spec
from healthdash.filters import DashboardFilters
from healthdash.queries import country_name_column


def _scatter_payload(
    filters: DashboardFilters,
    frame: pd.DataFrame,
    *,
    year: int,
    x: str,
    y: str,
    x_title: str,
    y_title: str,
    title: str,
) -> Dict[str, Any]:
    points = frame.dropna(subset=[x, y]) if {x, y}.issubset(frame.columns) else frame.iloc[0:0]
    chart = scatter_chart(
        frame,
        x,
        y,
        x_title=x_title,
        y_title=y_title,
        name_column=country_name_column(frame.columns),
        title=title,
    )
    return {
        "filters": asdict(filters),
        "year": year,
        "points": int(len(points)),
        "missing_columns": [c for c in (x, y, "region") if c not in frame.columns],
        "chart": to_vega_spec(chart),
    }


def compute_wealth(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    """GDP per capita vs life expectancy for the selected year."""
    frame: pd.DataFrame = ctx.get("wealth_year", pd.DataFrame())
    return _scatter_payload(
        filters,
        frame,
        year=filters.wealth_year,
        x="GDP_PC",
        y="lifeExpectancy",
        x_title="GDP per capita (USD)",
        y_title="Life expectancy (Years)",
        title="GDP per capita vs. life expectancy",
    )


def compute_emissions(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    """GDP per capita vs CO2 emissions per capita for the selected year."""
    frame: pd.DataFrame = ctx.get("emissions_year", pd.DataFrame())
    return _scatter_payload(
        filters,
        frame,
        year=filters.emissions_year,
        x="GDP_PC",
        y="co2_PC",
        x_title="GDP Per Capita (USD)",
        y_title="CO2 Emissions Per Capita (Metric Tons)",
        title="GDP per capita vs. CO2 emissions per capita",
    )
