"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from api.main import app


@pytest.fixture
def client():
    client = TestClient(app)
    response = client.post("/reset", json={"profile": "taproot", "seed": 1})
    assert response.status_code == 200
    return client


class TestSimulationApi:
    def test_profiles(self, client):
        profiles = client.get("/profiles").json()["profiles"]
        assert {"taproot", "fibrous", "shoot"} <= set(profiles)

    def test_reset_returns_fresh_organism(self, client):
        organism = client.post("/reset", json={"profile": "fibrous", "seed": 2}).json()["organism"]
        assert organism["simtime"] == 0.0
        assert organism["number_of_nodes"] == 1
        assert organism["number_of_organs"] == 7
        assert organism["segments"] == []

    def test_reset_unknown_profile(self, client):
        assert client.post("/reset", json={"profile": "cactus"}).status_code == 404

    def test_reset_rejects_unknown_nan_policy(self, client):
        assert client.post("/reset", json={"nan_policy": "ignore"}).status_code == 422

    def test_step_and_delta(self, client):
        body = client.post("/step", json={"dt": 1.0}).json()
        result, organism = body["result"], body["organism"]
        assert result["simtime"] == 1.0
        assert len(result["new_nodes"]) == organism["number_of_nodes"] - 1
        assert len(result["new_segments"]) == len(result["new_nodes"])

        delta = client.get("/delta").json()["delta"]
        assert delta["simtime"] == 1.0
        assert delta["old_number_of_nodes"] == 1
        assert delta["new_nodes"] == result["new_nodes"]
        assert delta["new_segments"] == result["new_segments"]

    def test_negative_step_is_rejected(self, client):
        assert client.post("/step", json={"dt": -1.0}).status_code == 422

    def test_simulate(self, client):
        body = client.post("/simulate", json={"days": 3, "dt": 1}).json()
        assert body["result"]["simtime"] == 3.0
        assert body["result"]["new_nodes"] == body["organism"]["number_of_nodes"] - 1
        assert client.get("/state").json()["organism"]["simtime"] == 3.0

    def test_prune(self, client):
        client.post("/simulate", json={"days": 2})
        organs = client.post("/prune", json={"organ_id": 1}).json()["organism"]["organs"]
        states = {organ["id"]: organ["state"] for organ in organs}
        assert states[1] == "Dead"
        assert states[0] != "Dead"

    def test_prune_unknown_organ(self, client):
        assert client.post("/prune", json={"organ_id": 999}).status_code == 404

    def test_summed(self, client):
        client.post("/simulate", json={"days": 2})
        body = client.get("/summed/length", params={"otype": "root"}).json()
        assert body["value"] > 0
        assert client.get("/summed/noSuchParameter").json()["value"] is None
        assert client.get("/summed/length", params={"otype": "flower"}).status_code == 404
