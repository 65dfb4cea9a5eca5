from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

from healthdash.config import REGION_COLORS

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _as_text(series: pd.Series) -> pd.Series:
    out = series.astype(object)
    return out.where(series.notna(), None)


def scatter_chart(
    frame: pd.DataFrame,
    x: str,
    y: str,
    *,
    x_title: str,
    y_title: str,
    color: str = "region",
    name_column: Optional[str] = None,
    log_x: bool = False,
    title: Optional[str] = None,
) -> alt.Chart:
    """Scatter of two numeric columns coloured by `color`.

    Values are copied into plain `x`/`y` fields: Vega-Lite reads dots and
    brackets in field names (e.g. `pm2.5_35`) as nested access.
    """
    data = pd.DataFrame(index=frame.index)
    data["x"] = pd.to_numeric(frame[x], errors="coerce") if x in frame.columns else float("nan")
    data["y"] = pd.to_numeric(frame[y], errors="coerce") if y in frame.columns else float("nan")
    data["group"] = _as_text(frame[color]).fillna("Unknown") if color in frame.columns else "Unknown"
    data["iso3"] = _as_text(frame["iso3"]) if "iso3" in frame.columns else None
    tooltip: List[Any] = [alt.Tooltip("iso3:N", title="ISO3")]
    if name_column and name_column in frame.columns:
        data["country"] = _as_text(frame[name_column])
        tooltip.append(alt.Tooltip("country:N", title="Country"))
    data = data.dropna(subset=["x", "y"])
    if log_x:
        data = data[data["x"] > 0]
    tooltip += [
        alt.Tooltip("x:Q", title=x_title, format=",.2f"),
        alt.Tooltip("y:Q", title=y_title, format=",.2f"),
        alt.Tooltip("group:N", title="Region"),
    ]

    chart = (
        alt.Chart(data.reset_index(drop=True))
        .mark_circle(size=60)
        .encode(
            x=alt.X("x:Q", title=x_title, scale=alt.Scale(type="log") if log_x else alt.Scale(zero=False)),
            y=alt.Y("y:Q", title=y_title, scale=alt.Scale(zero=False)),
            color=alt.Color("group:N", title="Region", scale=alt.Scale(range=REGION_COLORS)),
            tooltip=tooltip,
        )
    )
    if title:
        chart = chart.properties(title=title)
    return chart
