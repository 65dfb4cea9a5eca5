from __future__ import annotations

from typing import Iterable, List, Optional

import pandas as pd


NAME_COLUMNS = ["name_x", "name", "name_y"]


def country_name_column(columns: Iterable[object]) -> Optional[str]:
    cols = {str(c) for c in columns}
    for col in NAME_COLUMNS:
        if col in cols:
            return col
    return None


def filter_by_year(frame: pd.DataFrame, year: int) -> pd.DataFrame:
    if "time" not in frame.columns:
        return frame.iloc[0:0].copy()
    return frame[frame["time"] == int(year)].copy()


def filter_present(frame: pd.DataFrame, column: str) -> pd.DataFrame:
    if column not in frame.columns:
        return frame.iloc[0:0].copy()
    return frame[frame[column].notna()].copy()


def group_mean(frame: pd.DataFrame, keys: Iterable[str], columns: Iterable[str]) -> pd.DataFrame:
    """Mean of `columns` per group; rows with a missing key form their own group."""
    keys = list(keys)
    columns = list(dict.fromkeys(columns))
    data = frame[[k for k in keys if k in frame.columns]].copy()
    for key in keys:
        if key not in data.columns:
            data[key] = pd.NA
    for col in columns:
        data[col] = pd.to_numeric(frame[col], errors="coerce") if col in frame.columns else float("nan")
    if data.empty:
        return pd.DataFrame(columns=keys + columns)
    return data.groupby(keys, dropna=False, sort=True)[columns].mean().reset_index()


def sample_rows(frame: pd.DataFrame, n: int, seed: Optional[int] = None) -> pd.DataFrame:
    n = max(0, min(int(n), len(frame)))
    return frame.sample(n=n, replace=False, random_state=seed).copy()


def select_health_data(frame: pd.DataFrame, indicator: str, year: int, average: bool) -> pd.DataFrame:
    result = filter_present(frame, "spending")
    result = filter_present(result, indicator)
    if average:
        return group_mean(result, ["iso3", "region"], ["spending", indicator])
    return filter_by_year(result, year)


def correlation(x: Iterable[object], y: Iterable[object]) -> float:
    """Pearson correlation; NaN when undefined (constant input, fewer than two pairs)."""
    xs = pd.to_numeric(pd.Series(x).reset_index(drop=True), errors="coerce")
    ys = pd.to_numeric(pd.Series(y).reset_index(drop=True), errors="coerce")
    return float(xs.corr(ys))


def correlation_text(indicator: str, value: float) -> str:
    return f"The correlation between {indicator} and general domestic health expenditures is {value}."


def columns_present(frame: pd.DataFrame, columns: Iterable[str]) -> List[str]:
    return [c for c in columns if c in frame.columns]
