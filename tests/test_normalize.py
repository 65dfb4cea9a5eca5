from __future__ import annotations

import pandas as pd
import pytest

from healthdash.data import (
    DataSourceError,
    normalize_demographics,
    normalize_economic,
    normalize_spending,
    spending_year_columns,
)


def test_spending_single_country_scenario():
    raw = pd.DataFrame({"Country Name": ["Testland"], "Country Code": ["TST"], "2000": [5.0], "2001": [7.0]})
    out = normalize_spending(raw)
    assert list(out.columns) == ["name", "iso3", "time", "spending"]
    assert out.to_dict(orient="records") == [
        {"name": "Testland", "iso3": "TST", "time": 2000, "spending": 5.0},
        {"name": "Testland", "iso3": "TST", "time": 2001, "spending": 7.0},
    ]


def test_spending_keeps_only_bounded_years_and_present_values():
    raw = pd.DataFrame(
        {
            "Country Name": ["A", "B"],
            "Country Code": ["AAA", "BBB"],
            "Indicator Name": ["x", "x"],
            "1999": [1.0, 2.0],
            "2000": [3.0, None],
            "2019": [4.0, 5.0],
            "2020": [6.0, 7.0],
        }
    )
    out = normalize_spending(raw)
    assert out["time"].between(2000, 2019).all()
    assert out["spending"].notna().all()
    assert out["time"].dtype == "int64"
    assert sorted(zip(out["iso3"], out["time"])) == [("AAA", 2000), ("AAA", 2019), ("BBB", 2019)]


def test_spending_drops_rows_without_country_code_and_non_numeric_values():
    raw = pd.DataFrame(
        {
            "Country Name": ["A", "B", "C"],
            "Country Code": ["AAA", None, "CCC"],
            "2000": ["1.5", "2.0", ".."],
        }
    )
    out = normalize_spending(raw)
    assert out[["iso3", "time", "spending"]].values.tolist() == [["AAA", 2000, 1.5]]


def test_spending_without_year_columns_is_empty():
    raw = pd.DataFrame({"Country Name": ["A"], "Country Code": ["AAA"], "1990": [1.0]})
    out = normalize_spending(raw)
    assert out.empty
    assert list(out.columns) == ["name", "iso3", "time", "spending"]


def test_spending_missing_required_column_raises():
    raw = pd.DataFrame({"Country Name": ["A"], "2000": [1.0]})
    with pytest.raises(DataSourceError, match="Country Code"):
        normalize_spending(raw)


def test_spending_year_columns_bounds():
    assert spending_year_columns(["Country Name", "1999", "2000", " 2010 ", "2019", "2020", "20x0"]) == ["2000", "2010", "2019"]


def test_economic_pivot_scenario():
    raw = pd.DataFrame(
        {
            "Indicator": ["GDP", "CO2"],
            "LOCATION": ["TST", "TST"],
            "Country": ["Testland", "Testland"],
            "Time": [2000, 2000],
            "Value": [100, 2],
        }
    )
    out = normalize_economic(raw)
    assert list(out.columns) == ["iso3", "name", "time", "GDP", "CO2"]
    assert out.to_dict(orient="records") == [{"iso3": "TST", "name": "Testland", "time": 2000, "GDP": 100.0, "CO2": 2.0}]


def test_economic_one_row_per_key_with_missing_cells():
    raw = pd.DataFrame(
        {
            "Indicator": ["GDP", "GDP", "CO2", "GDP", "CO2"],
            "LOCATION": ["AAA", "AAA", "AAA", "BBB", "BBB"],
            "Country": ["A", "A", "A-land", "B", "B"],
            "Time": [2000, 2001, 2000, 2000, "bad"],
            "Value": [1, 2, 3, 4, 5],
        }
    )
    out = normalize_economic(raw)
    assert not out.duplicated(subset=["iso3", "time"]).any()
    assert len(out) == 3
    bbb = out[out["iso3"] == "BBB"].iloc[0]
    assert bbb["GDP"] == 4.0
    assert pd.isna(bbb["CO2"])
    aaa_2000 = out[(out["iso3"] == "AAA") & (out["time"] == 2000)].iloc[0]
    assert aaa_2000["name"] == "A"
    assert aaa_2000["CO2"] == 3.0


def test_economic_first_non_missing_value_wins_for_repeated_indicator():
    raw = pd.DataFrame(
        {
            "Indicator": ["GDP", "GDP", "GDP"],
            "LOCATION": ["TST", "TST", "TST"],
            "Country": ["Testland", "Testland", "Testland"],
            "Time": [2000, 2000, 2000],
            "Value": [None, 7, 9],
        }
    )
    out = normalize_economic(raw)
    assert len(out) == 1
    assert out.loc[0, "GDP"] == 7.0


def test_economic_drops_indicator_labels_that_clash_with_keys():
    raw = pd.DataFrame(
        {
            "Indicator": ["GDP", "name", "iso3", "time"],
            "LOCATION": ["TST", "TST", "TST", "TST"],
            "Country": ["Testland", "Testland", "Testland", "Testland"],
            "Time": [2000, 2000, 2000, 2000],
            "Value": [100, 2, 3, 4],
        }
    )
    out = normalize_economic(raw)
    assert list(out.columns) == ["iso3", "name", "time", "GDP"]
    assert out.to_dict(orient="records") == [{"iso3": "TST", "name": "Testland", "time": 2000, "GDP": 100.0}]


def test_economic_with_only_clashing_labels_is_empty():
    raw = pd.DataFrame(
        {"Indicator": ["name"], "LOCATION": ["TST"], "Country": ["Testland"], "Time": [2000], "Value": [2]}
    )
    out = normalize_economic(raw)
    assert out.empty
    assert list(out.columns) == ["iso3", "name", "time"]


def test_economic_missing_required_column_raises():
    raw = pd.DataFrame({"Indicator": ["GDP"], "LOCATION": ["TST"], "Time": [2000], "Value": [1]})
    with pytest.raises(DataSourceError, match="Country"):
        normalize_economic(raw)


def test_demographics_drops_malformed_keys():
    raw = pd.DataFrame(
        {
            "iso3": ["AAA", None, "CCC", "DDD"],
            "time": ["2000", "2001", "soon", "2000.5"],
            "lifeExpectancy": [70.0, 71.0, 72.0, 73.0],
        }
    )
    out = normalize_demographics(raw)
    assert out[["iso3", "time"]].values.tolist() == [["AAA", 2000]]
    assert out["time"].dtype == "int64"
