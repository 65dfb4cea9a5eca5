from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from healthdash.config import (
    CSV_DELIMITER,
    DEMOGRAPHICS_FILE,
    ECONOMIC_FILE,
    JOIN_KEYS,
    JOIN_SUFFIXES,
    SPENDING_FILE,
    SPENDING_FIRST_YEAR,
    SPENDING_LAST_YEAR,
    get_data_dir,
)
from healthdash.filters import DashboardFilters, normalize_filters
from healthdash.indicators import IndicatorSpec, resolve_indicators
from healthdash.queries import filter_by_year, select_health_data


logger = logging.getLogger(__name__)

SPENDING_COLUMNS = {
    "Country Name": "name",
    "Country Code": "iso3",
}

ECONOMIC_COLUMNS = {
    "Indicator": "indicator",
    "LOCATION": "iso3",
    "Country": "name",
    "Time": "time",
    "Value": "value",
}

DEMOGRAPHICS_REQUIRED = list(JOIN_KEYS)

# Indicator labels that would overwrite the key columns of the pivoted table.
RESERVED_INDICATORS = {"iso3", "name", "time"}

YEAR_COLUMN = re.compile(r"\d{4}")


class DataSourceError(RuntimeError):
    """A source file is missing, unreadable or lacks a required column."""


@dataclass(frozen=True, eq=False)
class CombinedTable:
    """Full outer join of the normalized sources, keyed by (iso3, time).

    The wrapped frame is shared by every consumer; use `view()` to get a
    private copy before filtering.
    """

    frame: pd.DataFrame

    def view(self) -> pd.DataFrame:
        return self.frame.copy()

    @property
    def columns(self) -> List[str]:
        return [str(c) for c in self.frame.columns]

    def duplicate_keys(self) -> int:
        if self.frame.empty:
            return 0
        return int(self.frame.duplicated(subset=list(JOIN_KEYS)).sum())

    def __len__(self) -> int:
        return len(self.frame)


# ---------------- Helpers ----------------
def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            series = series.replace({"nan": pd.NA, "None": pd.NA, "": pd.NA})
            df[col] = series
    return df


def coerce_year(series: pd.Series) -> pd.Series:
    """Numeric years; non-numeric and non-integral values become NaN."""
    years = pd.to_numeric(series, errors="coerce")
    return years.where(years.notna() & (years % 1 == 0))


def require_columns(df: pd.DataFrame, cols: Iterable[str], source: str) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise DataSourceError(f"{source} source is missing required columns: {', '.join(missing)}")


def drop_malformed_keys(df: pd.DataFrame, source: str) -> pd.DataFrame:
    df = coerce_str_safe(df, ["iso3"])
    df["time"] = coerce_year(df["time"])
    before = len(df)
    df = df.dropna(subset=list(JOIN_KEYS)).copy()
    df["time"] = df["time"].astype("int64")
    if len(df) < before:
        logger.debug("%s: dropped %d rows with malformed keys", source, before - len(df))
    return df


def read_source(path: Path) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, sep=CSV_DELIMITER, encoding="utf-8-sig", low_memory=False)
    except FileNotFoundError as exc:
        raise DataSourceError(f"Source file not found: {path}") from exc
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataSourceError(f"Could not read {path.name}: {exc}") from exc
    df.columns = [str(c).strip() for c in df.columns]
    logger.info("Loaded %s (%d rows, %d columns)", path.name, len(df), len(df.columns))
    return df


# ---------------- Normalizers ----------------
def spending_year_columns(columns: Iterable[object]) -> List[str]:
    out: List[str] = []
    for col in columns:
        label = str(col).strip()
        if YEAR_COLUMN.fullmatch(label) and SPENDING_FIRST_YEAR <= int(label) <= SPENDING_LAST_YEAR:
            out.append(label)
    return out


def normalize_spending(raw: pd.DataFrame) -> pd.DataFrame:
    """Wide-by-year spending -> one row per (iso3, time) with a `spending` value."""
    raw = raw.rename(columns=lambda c: str(c).strip())
    require_columns(raw, SPENDING_COLUMNS, "spending")
    year_cols = spending_year_columns(raw.columns)
    df = raw[list(SPENDING_COLUMNS) + year_cols].rename(columns=SPENDING_COLUMNS)
    if not year_cols:
        long = pd.DataFrame({"name": [], "iso3": [], "time": [], "spending": []})
    else:
        long = df.melt(id_vars=["name", "iso3"], value_vars=year_cols, var_name="time", value_name="spending")
    long["spending"] = pd.to_numeric(long["spending"], errors="coerce")
    long = long.dropna(subset=["spending"])
    long = drop_malformed_keys(long, "spending")
    long = coerce_str_safe(long, ["name"])
    long = long.sort_values(list(JOIN_KEYS), kind="mergesort")
    return long[["name", "iso3", "time", "spending"]].reset_index(drop=True)


def normalize_economic(raw: pd.DataFrame) -> pd.DataFrame:
    """Long indicator rows -> one row per (iso3, time), one column per indicator label."""
    require_columns(raw, ECONOMIC_COLUMNS, "economic")
    df = raw[list(ECONOMIC_COLUMNS)].rename(columns=ECONOMIC_COLUMNS)
    df = coerce_str_safe(df, ["indicator", "name"])
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = drop_malformed_keys(df, "economic")
    df = df.dropna(subset=["indicator"])
    reserved = df["indicator"].isin(RESERVED_INDICATORS)
    if reserved.any():
        logger.debug("economic: dropped %d rows with reserved indicator labels", int(reserved.sum()))
        df = df[~reserved]
    if df.empty:
        empty = pd.DataFrame({"iso3": pd.Series(dtype="string"), "name": pd.Series(dtype="string")})
        empty["time"] = pd.Series(dtype="int64")
        return empty

    labels = [str(x) for x in pd.unique(df["indicator"])]
    wide = df.groupby(["iso3", "time", "indicator"], sort=True)["value"].first().unstack("indicator")
    wide = wide.reindex(columns=labels)
    wide.columns.name = None
    wide.insert(0, "name", df.groupby(["iso3", "time"], sort=True)["name"].first())
    wide = wide.reset_index()
    return wide[["iso3", "name", "time"] + labels]


def normalize_demographics(raw: pd.DataFrame) -> pd.DataFrame:
    require_columns(raw, DEMOGRAPHICS_REQUIRED, "demographics")
    df = drop_malformed_keys(raw.copy(), "demographics")
    return df.reset_index(drop=True)


# ---------------- Join ----------------
def build_combined(demographics: pd.DataFrame, economic: pd.DataFrame, spending: pd.DataFrame) -> CombinedTable:
    keys = list(JOIN_KEYS)
    combined = demographics.merge(economic, on=keys, how="outer", suffixes=JOIN_SUFFIXES)
    combined = combined.merge(spending, on=keys, how="outer", suffixes=JOIN_SUFFIXES)
    combined["time"] = combined["time"].astype("int64")
    table = CombinedTable(frame=combined.reset_index(drop=True))
    dupes = table.duplicate_keys()
    if dupes:
        logger.warning("Combined table has %d duplicated (iso3, time) keys", dupes)
    logger.info("Combined table: %d rows, %d columns", len(table), len(table.columns))
    return table


# ---------------- Public API (Streamlit + FastAPI use) ----------------
def get_source_files(data_dir: Optional[Path] = None) -> Dict[str, Path]:
    base = Path(data_dir) if data_dir is not None else get_data_dir()
    files = {
        "demographics": base / DEMOGRAPHICS_FILE,
        "economic": base / ECONOMIC_FILE,
        "spending": base / SPENDING_FILE,
    }
    missing = [path.name for path in files.values() if not path.is_file()]
    if missing:
        raise DataSourceError(f"Missing source files in {base}: {', '.join(missing)}")
    return files


def file_signature(files: Dict[str, Path]) -> Tuple[Tuple[str, str, float], ...]:
    return tuple((key, str(path), path.stat().st_mtime) for key, path in files.items())


def run_pipeline(files: Dict[str, Path]) -> Dict[str, object]:
    demographics = normalize_demographics(read_source(files["demographics"]))
    economic = normalize_economic(read_source(files["economic"]))
    spending = normalize_spending(read_source(files["spending"]))
    combined = build_combined(demographics, economic, spending)
    indicators = resolve_indicators(combined.frame)
    years = sorted(int(y) for y in combined.frame["time"].unique())
    return {
        "files": [path.name for path in files.values()],
        "years": years,
        "demographics": demographics,
        "economic": economic,
        "spending": spending,
        "combined": combined,
        "indicators": indicators,
    }


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, str, float], ...]) -> Dict[str, object]:
    files = {key: Path(path) for key, path, _ in files_sig}
    return run_pipeline(files)


def load_dashboard_data(data_dir: Optional[Path] = None) -> Dict[str, object]:
    files = get_source_files(data_dir)
    return _load_dashboard_data_cached(file_signature(files))


def prepare_context(filters: dict | DashboardFilters, data_ctx: Dict[str, object]) -> Dict[str, object]:
    combined: CombinedTable = data_ctx["combined"]  # type: ignore[assignment]
    indicators: Dict[str, IndicatorSpec] = data_ctx.get("indicators") or {}  # type: ignore[assignment]
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters, indicators=list(indicators))

    frame = combined.view()
    health_data = pd.DataFrame()
    if filt.indicator:
        health_data = select_health_data(frame, filt.indicator, filt.health_year, filt.average)

    return {
        "filters": filt,
        "files": data_ctx.get("files", []),
        "years": data_ctx.get("years", []),
        "indicators": indicators,
        "combined": frame,
        "duplicate_keys": combined.duplicate_keys(),
        "wealth_year": filter_by_year(frame, filt.wealth_year),
        "emissions_year": filter_by_year(frame, filt.emissions_year),
        "health_data": health_data,
        "demographics": data_ctx.get("demographics", pd.DataFrame()),
        "economic": data_ctx.get("economic", pd.DataFrame()),
        "spending": data_ctx.get("spending", pd.DataFrame()),
    }
