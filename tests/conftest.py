from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from healthdash import data as dc
from healthdash.config import DATA_DIR_ENV, INDICATORS_ENV


DEMOGRAPHICS_CSV = """iso3,name,region,time,lifeExpectancy,childMortality,GDP_PC,co2_PC
AAA,Alphaland,Europe,2000,75.0,8.0,20000,6.5
AAA,Alphaland,Europe,2001,75.5,7.5,21000,6.4
BBB,Betaland,Africa,2000,55.0,90.0,900,0.3
BBB,Betaland,Africa,2001,56.0,85.0,950,0.35
CCC,Gammaland,Asia,1999,70.0,20.0,5000,2.0
,Nowhere,Asia,2000,1.0,1.0,1.0,1.0
DDD,Deltaland,Asia,not-a-year,60.0,40.0,3000,1.5
"""

ECONOMIC_CSV = """Indicator,LOCATION,Country,Time,Value,Flag Codes
GDP growth (annual %),AAA,Alphaland,2000,2.5,
GDP growth (annual %),AAA,Alphaland,2001,1.5,
Population growth (annual %),AAA,Alphaland,2000,0.4,
GDP growth (annual %),BBB,Betaland,2000,4.0,
GDP,TST,Testland,2000,100,
CO2,TST,Testland,2000,2,
"""

SPENDING_CSV = """Country Name,Country Code,1999,2000,2001,2020
Alphaland,AAA,900,1000,1100,1200
Betaland,BBB,,20,25,30
Testland,TST,,5.0,7.0,
"""


def write_sources(base: Path, demographics: str = DEMOGRAPHICS_CSV, economic: str = ECONOMIC_CSV, spending: str = SPENDING_CSV) -> Path:
    base.mkdir(parents=True, exist_ok=True)
    (base / "demographics.csv").write_text(demographics, encoding="utf-8")
    (base / "economic.csv").write_text(economic, encoding="utf-8")
    (base / "governmentspending.csv").write_text(spending, encoding="utf-8")
    return base


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    monkeypatch.delenv(INDICATORS_ENV, raising=False)
    dc._load_dashboard_data_cached.cache_clear()
    yield
    dc._load_dashboard_data_cached.cache_clear()


@pytest.fixture
def data_dir(tmp_path, monkeypatch) -> Path:
    base = write_sources(tmp_path / "data")
    monkeypatch.setenv(DATA_DIR_ENV, str(base))
    return base


@pytest.fixture
def data_ctx(data_dir):
    return dc.load_dashboard_data()


@pytest.fixture
def combined(data_ctx) -> pd.DataFrame:
    return data_ctx["combined"].view()
