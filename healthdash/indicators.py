"""Registry of plottable indicator columns.

The health spending page lets the user pick one indicator of the combined
table. Instead of offering every column, the choices come from an explicit
allow-list which is checked against the real schema once, when the data is
loaded. Each entry carries a typed accessor so callers never index the frame
with a raw user string.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import pandas as pd

from healthdash.config import INDICATORS_ENV, JOIN_KEYS


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndicatorSpec:
    column: str
    label: str
    source: str = "custom"

    def values(self, frame: pd.DataFrame) -> pd.Series:
        """Numeric values of this indicator (NaN where missing or not parseable)."""
        if self.column not in frame.columns:
            return pd.Series(float("nan"), index=frame.index, dtype=float)
        return pd.to_numeric(frame[self.column], errors="coerce")


DEFAULT_INDICATORS = (
    IndicatorSpec("lifeExpectancy", "Life expectancy (years)", "demographics"),
    IndicatorSpec("childMortality", "Child mortality (per 1,000 live births)", "demographics"),
    IndicatorSpec("fertilityRate", "Fertility rate (births per woman)", "demographics"),
    IndicatorSpec("totalPopulation", "Total population", "demographics"),
    IndicatorSpec("GDP_PC", "GDP per capita (USD)", "demographics"),
    IndicatorSpec("co2_PC", "CO2 emissions per capita (metric tons)", "demographics"),
    IndicatorSpec("youthFemaleLiteracy", "Youth female literacy (%)", "demographics"),
    IndicatorSpec("youthMaleLiteracy", "Youth male literacy (%)", "demographics"),
    IndicatorSpec("adultLiteracy", "Adult literacy (%)", "demographics"),
    IndicatorSpec("accessElectricity", "Access to electricity (% of population)", "demographics"),
    IndicatorSpec("GDP growth (annual %)", "GDP growth (annual %)", "economic"),
    IndicatorSpec("GDP per capita (current US$)", "GDP per capita (current US$)", "economic"),
    IndicatorSpec("GDP (current US$)", "GDP (current US$)", "economic"),
    IndicatorSpec("Population growth (annual %)", "Population growth (annual %)", "economic"),
    IndicatorSpec("Life expectancy at birth, total (years)", "Life expectancy at birth, total (years)", "economic"),
    IndicatorSpec(
        "Mortality rate, infant (per 1,000 live births)",
        "Mortality rate, infant (per 1,000 live births)",
        "economic",
    ),
    IndicatorSpec("Fertility rate, total (births per woman)", "Fertility rate, total (births per woman)", "economic"),
)

NON_INDICATOR_COLUMNS = set(JOIN_KEYS) | {"spending"}


def allowed_indicators() -> List[IndicatorSpec]:
    """Allow-list from the environment (`;`-separated columns) or the defaults."""
    raw = os.getenv(INDICATORS_ENV)
    if not raw or not raw.strip():
        return list(DEFAULT_INDICATORS)
    known = {spec.column: spec for spec in DEFAULT_INDICATORS}
    columns = [c.strip() for c in raw.split(";") if c.strip()]
    return [known.get(c, IndicatorSpec(c, c)) for c in columns]


def _is_numeric(frame: pd.DataFrame, column: str) -> bool:
    return pd.api.types.is_numeric_dtype(frame[column])


def resolve_indicators(
    frame: pd.DataFrame, allowed: Optional[Sequence[IndicatorSpec]] = None
) -> Dict[str, IndicatorSpec]:
    allowed = list(allowed) if allowed is not None else allowed_indicators()
    resolved: Dict[str, IndicatorSpec] = {}
    for spec in allowed:
        if spec.column in NON_INDICATOR_COLUMNS or spec.column not in frame.columns:
            continue
        if _is_numeric(frame, spec.column):
            resolved[spec.column] = spec

    dropped = [spec.column for spec in allowed if spec.column not in resolved]
    if dropped:
        logger.info("Indicators not available in the combined table: %s", ", ".join(dropped))

    if not resolved:
        fallback = [str(c) for c in frame.columns if c not in NON_INDICATOR_COLUMNS and _is_numeric(frame, c)]
        logger.warning("No allow-listed indicator found; falling back to %d numeric columns", len(fallback))
        resolved = {c: IndicatorSpec(c, c) for c in fallback}
    return resolved
