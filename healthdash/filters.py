from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from healthdash.config import SAMPLE_SIZE_DEFAULT, SAMPLE_SIZE_MAX


@dataclass(frozen=True)
class YearRange:
    first: int
    last: int
    default: int = 2000

    def clamp(self, value: int) -> int:
        return max(self.first, min(self.last, value))


WEALTH_YEARS = YearRange(2000, 2019)
EMISSIONS_YEARS = YearRange(1960, 2019)
HEALTH_YEARS = YearRange(2000, 2019)


@dataclass(frozen=True)
class DashboardFilters:
    wealth_year: int = WEALTH_YEARS.default
    emissions_year: int = EMISSIONS_YEARS.default
    health_year: int = HEALTH_YEARS.default
    indicator: str = ""
    average: bool = False
    sample_size: int = SAMPLE_SIZE_DEFAULT
    seed: Optional[int] = None


def _as_int(value: object, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(float(value))  # type: ignore[arg-type]
    except Exception:
        return default


def _as_bool(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _year(raw: dict, key: str, years: YearRange) -> int:
    return years.clamp(_as_int(raw.get(key), years.default))


def normalize_filters(raw: dict, *, indicators: Optional[List[str]] = None) -> DashboardFilters:
    indicators = list(indicators or [])

    indicator = str(raw.get("indicator") or "").strip()
    if indicators and indicator not in indicators:
        indicator = indicators[0]

    sample_size = _as_int(raw.get("sample_size"), SAMPLE_SIZE_DEFAULT)
    sample_size = max(1, min(SAMPLE_SIZE_MAX, sample_size))

    seed_raw = raw.get("seed")
    seed = _as_int(seed_raw, -1) if seed_raw is not None else None
    if seed is not None and seed < 0:
        seed = None

    return DashboardFilters(
        wealth_year=_year(raw, "wealth_year", WEALTH_YEARS),
        emissions_year=_year(raw, "emissions_year", EMISSIONS_YEARS),
        health_year=_year(raw, "health_year", HEALTH_YEARS),
        indicator=indicator,
        average=_as_bool(raw.get("average", False)),
        sample_size=sample_size,
        seed=seed,
    )
