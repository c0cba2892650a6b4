"""Tests for the read-only HTTP API."""

import pytest
from fastapi.testclient import TestClient

from rentmap.api.app import app
from rentmap.api.deps import get_store
from rentmap.models.datasets import DatasetKind


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health_reports_load_state(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "data_loaded": False}


class TestNeighbourhoodRoutes:
    def test_list_loads_store(self, client, store):
        resp = client.get("/api/v1/neighbourhoods")
        assert resp.status_code == 200
        assert "ALBERTA AVENUE" in resp.json()
        assert store.is_loaded()

    def test_profile(self, client):
        resp = client.get("/api/v1/neighbourhoods/oliver", params={"unit_type": ["studio", "1_bedroom"]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "OLIVER"
        assert body["rent_is_zone_average"] is True
        assert body["rent"]["_inheritedFrom"] == "DOWNTOWN"
        assert [p["label"] for p in body["unit_prices"]] == ["Studio", "1 Bedroom"]
        assert body["crime_quartile"]["tier"] == 1

    def test_profile_unknown(self, client):
        assert client.get("/api/v1/neighbourhoods/nowhere").status_code == 404

    def test_profile_bad_unit_type(self, client):
        resp = client.get("/api/v1/neighbourhoods/oliver", params={"unit_type": "penthouse"})
        assert resp.status_code == 422

    def test_direct_rent_has_no_marker(self, client):
        body = client.get("/api/v1/neighbourhoods/Downtown/rent").json()
        assert body["1_bedroom"] == 1300
        assert "_inheritedFrom" not in body

    def test_inherited_rent(self, client):
        body = client.get("/api/v1/neighbourhoods/Alberta Avenue/rent").json()
        assert body["_inheritedFrom"] == "HIGHLANDS/ALBERTA AVENUE"

    def test_rent_missing(self, client):
        assert client.get("/api/v1/neighbourhoods/Garneau/rent").status_code == 404


class TestQuartileRoutes:
    def test_crime_quartiles(self, client):
        body = client.get("/api/v1/quartiles/crime").json()
        assert {k: v["tier"] for k, v in body.items()} == {
            "DOWNTOWN": 3, "OLIVER": 1, "ALBERTA AVENUE": 2, "GLENORA": 1,
        }

    def test_parks_quartiles_cover_every_neighbourhood(self, client):
        body = client.get("/api/v1/quartiles/parks").json()
        assert len(body) == 6
        assert body["ALBERTA AVENUE"]["label"] == "Excellent Parks"

    def test_unknown_metric(self, client):
        assert client.get("/api/v1/quartiles/noise").status_code == 422

    def test_metric_choices_are_documented(self, client):
        schema = client.get("/openapi.json").json()
        assert schema["components"]["schemas"]["Metric"]["enum"] == ["crime", "schools", "parks"]


class TestLoadFailure:
    def test_failed_load_is_503_then_retries(self, client, source):
        source.failures[DatasetKind.CRIME] = OSError("unreachable")
        resp = client.get("/api/v1/neighbourhoods")
        assert resp.status_code == 503
        assert "crime" in resp.json()["detail"]

        del source.failures[DatasetKind.CRIME]
        resp = client.get("/api/v1/neighbourhoods")
        assert resp.status_code == 200
        assert source.calls[DatasetKind.CRIME] == 2
