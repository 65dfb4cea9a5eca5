from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


DATA_DIR_ENV = "HEALTHDASH_DATA_DIR"
LOG_LEVEL_ENV = "HEALTHDASH_LOG_LEVEL"
INDICATORS_ENV = "HEALTHDASH_INDICATORS"

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"

DEMOGRAPHICS_FILE = "demographics.csv"
ECONOMIC_FILE = "economic.csv"
SPENDING_FILE = "governmentspending.csv"
CSV_DELIMITER = ","

# Year columns of the spending file that carry actual data.
SPENDING_FIRST_YEAR = 2000
SPENDING_LAST_YEAR = 2019

JOIN_KEYS = ("iso3", "time")
JOIN_SUFFIXES = ("_x", "_y")

OVERVIEW_COLUMNS = [
    "iso3",
    "name_x",
    "time",
    "lifeExpectancy",
    "childMortality",
    "spending",
    "GDP growth (annual %)",
]
SAMPLE_SIZE_DEFAULT = 5
SAMPLE_SIZE_MAX = 50

REGION_COLORS = ["#E69F00", "#F0E442", "#0072B2", "#D55E00", "#009E73"]
SPENDING_AXIS_TITLE = "Domestic General Government Health Expenditure P.C., PPP (current international $)"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_data_dir() -> Path:
    """Data directory, overridable through the environment."""
    raw = os.getenv(DATA_DIR_ENV)
    if raw and raw.strip():
        return Path(raw.strip()).expanduser()
    return DEFAULT_DATA_DIR


def configure_logging(level: Optional[str] = None) -> None:
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").strip().upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=LOG_FORMAT)
