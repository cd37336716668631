"""API integration tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from syllabus_match.api import dependencies as deps
from syllabus_match.app import app
from syllabus_match.core.errors import CorpusUnavailable


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["ok"] is True


def test_match_flow(client: TestClient, sample_syllabus: str) -> None:
    first = client.post("/syllabi/match", json={"raw_text": sample_syllabus, "owner_id": "user-1"})
    assert first.status_code == 200
    first_payload = first.json()
    assert first_payload["record"]["course_code"] == "CS101"
    assert first_payload["signature"]["signature_text"] == (
        "cs101|introductiontocomputerscience|fall|2024|springfielduniversity"
    )
    assert first_payload["decision"]["recommendation"] == "create"
    assert first_payload["decision"]["best_match"] is None

    second = client.post("/syllabi/match", json={"raw_text": sample_syllabus, "owner_id": "user-2"})
    assert second.status_code == 200
    decision = second.json()["decision"]
    assert decision["recommendation"] == "join"
    assert decision["best_match"]["signature"]["id"] == first_payload["signature"]["id"]
    assert decision["group_key"] == "group-cs101-springfielduniversity-fall-2024"

    recent = client.get("/signatures/recent", params={"limit": 1})
    assert recent.status_code == 200
    recent_payload = recent.json()
    assert recent_payload["total"] == 2
    assert [sig["owner_id"] for sig in recent_payload["signatures"]] == ["user-2"]


def test_match_requires_owner(client: TestClient) -> None:
    resp = client.post("/syllabi/match", json={"raw_text": "CS101", "owner_id": ""})
    assert resp.status_code == 422


def test_corpus_outage_maps_to_503(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    def _offline(kind, limit):
        raise CorpusUnavailable("store offline")

    monkeypatch.setattr(deps.get_store(), "scan_recent", _offline)
    resp = client.post("/syllabi/match", json={"raw_text": "CS101", "owner_id": "user-1"})
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Corpus store unavailable"


def test_metrics_endpoint(client: TestClient, sample_syllabus: str) -> None:
    client.post("/syllabi/match", json={"raw_text": sample_syllabus, "owner_id": "user-1"})
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "sylm_decisions_total" in resp.text
    assert "sylm_requests_total" in resp.text
