from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from healthdash.config import DATA_DIR_ENV
from healthdash_api.main import app


@pytest.fixture
def client(data_dir):
    return TestClient(app)


def test_meta_endpoints(client):
    assert client.get("/meta/years").json() == {"years": [1999, 2000, 2001]}
    indicators = client.get("/meta/indicators").json()["indicators"]
    assert indicators[0] == {"column": "lifeExpectancy", "label": "Life expectancy (years)", "source": "demographics"}


def test_overview_encodes_missing_values_as_null(client):
    body = client.post("/overview", json={"sample_size": 50, "seed": 3}).json()
    assert len(body["sample"]) == body["row_count"] == 7
    tst = [row for row in body["sample"] if row["iso3"] == "TST"]
    assert all(row["lifeExpectancy"] is None for row in tst)


def test_out_of_range_filters_are_clamped(client):
    response = client.post("/overview", json={"sample_size": 500, "wealth_year": 1900})
    assert response.status_code == 200
    body = response.json()
    assert body["filters"]["sample_size"] == 50
    assert body["filters"]["wealth_year"] == 2000
    assert len(body["sample"]) <= 50

    body = client.post("/overview", json={"sample_size": 0}).json()
    assert body["filters"]["sample_size"] == 1
    assert len(body["sample"]) == 1


def test_health_spending_endpoint(client):
    body = client.post("/health-spending", json={"indicator": "GDP growth (annual %)", "health_year": 2001}).json()
    assert body["points"] == 1
    assert body["correlation"] is None
    assert body["filters"]["indicator"] == "GDP growth (annual %)"


def test_scatter_endpoints(client):
    assert client.post("/wealth", json={"wealth_year": 2000}).json()["points"] == 2
    assert client.post("/emissions", json={"emissions_year": 1999}).json()["points"] == 1


def test_debug_endpoint(client):
    body = client.post("/debug", json={}).json()
    assert body["row_counts"]["combined_rows"] == 7


def test_export_csv(client):
    response = client.post("/export/wealth", json={"wealth_year": 2001})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("iso3,")
    assert len(lines) == 4


def test_missing_data_returns_error(tmp_path, monkeypatch):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "empty"))
    response = TestClient(app).get("/meta/years")
    assert response.status_code == 500
    assert response.json()["type"] == "DataSourceError"
