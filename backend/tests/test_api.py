"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from swing_engine.analysis.analyzer import analyze
from swing_engine.api.app import app
from swing_engine.api.routes.analysis import get_analysis_service
from swing_engine.models.schemas import AnalysisError, InstrumentSnapshot
from swing_engine.services.alpha_vantage import MissingApiKeyError
from swing_engine.services.report_formatter import DISCLAIMER

from conftest import SYMBOL, bullish_payloads


class StubService:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.symbols = []

    async def analyze_symbol(self, symbol):
        self.symbols.append(symbol)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(service):
    app.dependency_overrides[get_analysis_service] = lambda: service


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_analysis_json(client):
    report = analyze(InstrumentSnapshot(**bullish_payloads()), SYMBOL)
    service = StubService(result=report)
    _use(service)

    body = client.get(f"/api/analysis/{SYMBOL}").json()
    assert body["success"] is True
    assert body["data"]["score"] == 100
    assert body["data"]["verdict"] == "STRONG BUY"
    assert body["data"]["entry"] == "94.00"
    assert body["disclaimer"] == DISCLAIMER
    assert service.symbols == [SYMBOL]


def test_analysis_text(client):
    report = analyze(InstrumentSnapshot(**bullish_payloads()), SYMBOL)
    _use(StubService(result=report))

    resp = client.get(f"/api/analysis/{SYMBOL}", params={"format": "text"})
    assert resp.headers["content-type"].startswith("text/plain")
    assert "Swing Setup" in resp.text


def test_analysis_error_result(client):
    _use(StubService(result=AnalysisError(error="Missing essential data for analysis")))
    body = client.get(f"/api/analysis/{SYMBOL}").json()
    assert body == {"success": False, "message": "Missing essential data for analysis"}


def test_fetch_failure(client):
    _use(StubService(error=MissingApiKeyError("API key required")))
    body = client.get(f"/api/analysis/{SYMBOL}").json()
    assert body["success"] is False
    assert body["message"].startswith("API key required")
