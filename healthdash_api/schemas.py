from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class DashboardFiltersModel(BaseModel):
    wealth_year: int = 2000
    emissions_year: int = 2000
    health_year: int = 2000
    indicator: str = ""
    average: bool = False
    sample_size: int = 5
    seed: Optional[int] = None


class IndicatorModel(BaseModel):
    column: str
    label: str
    source: str


class MetaIndicatorsResponse(BaseModel):
    indicators: List[IndicatorModel]


class MetaYearsResponse(BaseModel):
    years: List[int]
