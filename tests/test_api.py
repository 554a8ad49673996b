"""
HTTP tests for the FastAPI application. Providers and the rate limiter are
injected through dependency overrides; nothing leaves the process.
"""

import pytest
from fastapi.testclient import TestClient

from src.app import create_app
from src.routes.brand_analysis_routes import get_providers
from utils.rate_limiter import InMemoryRateLimiter

from fakes import FailingProvider, FakeProvider

ANALYZE_URL = "/api/vln/analyze"


@pytest.fixture
def providers():
    return [FakeProvider("openai", "ChatGPT", "gpt-4o-mini", reply="1. acme.com is excellent\n2. beta.io")]


@pytest.fixture
def app(providers):
    application = create_app(rate_limiter=InMemoryRateLimiter(max_requests=5, window_minutes=60))
    application.dependency_overrides[get_providers] = lambda: providers
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


class TestAnalyzeEndpoint:

    def test_success(self, client, providers):
        response = client.post(ANALYZE_URL, json={"brand": "https://www.Acme.com", "competitors": ["beta.io"]})

        assert response.status_code == 200
        data = response.json()
        assert data["brand"] == "acme.com"
        assert data["competitors"] == ["beta.io"]
        assert data["overallVisibilityScore"] == 100
        assert data["demo"] is False
        assert len(data["aiProviderResponses"]) == 3
        assert data["aiProviderResponses"][0]["brandPosition"] == 1
        assert data["aiProviderResponses"][0]["sentiment"] == "positive"
        assert data["competitorComparison"][0] == {
            "competitor": "beta.io",
            "visibilityScore": 100,
            "mentionCount": 3,
            "averagePosition": 2,
            "sentiment": "neutral"
        }
        assert data["analysisMetadata"]["providersQueried"] == ["ChatGPT"]
        assert data["analysisMetadata"]["totalPromptsAnalyzed"] == 3
        assert len(providers[0].calls) == 3

    def test_competitors_optional(self, client):
        response = client.post(ANALYZE_URL, json={"brand": "acme.com"})

        assert response.status_code == 200
        assert response.json()["competitorComparison"] == []

    def test_duplicate_domains_rejected_before_any_call(self, client, providers):
        response = client.post(ANALYZE_URL, json={"brand": "shop.io", "competitors": ["a.com", "b.com", "shop.io"]})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Validation failed",
            "details": ["Duplicate domains detected. Each domain should be unique."]
        }
        assert response.headers["X-Error-Code"] == "DUPLICATE_DOMAINS"
        assert providers[0].calls == []

    def test_too_many_competitors(self, client):
        competitors = [f"c{i}.com" for i in range(11)]

        response = client.post(ANALYZE_URL, json={"brand": "acme.com", "competitors": competitors})

        assert response.status_code == 400
        assert "competitors: Maximum 10 competitors allowed" in response.json()["details"]

    def test_invalid_domain(self, client):
        response = client.post(ANALYZE_URL, json={"brand": "not a domain", "competitors": []})

        assert response.status_code == 400
        assert all(d.startswith("brand: ") for d in response.json()["details"])

    def test_missing_brand(self, client):
        response = client.post(ANALYZE_URL, json={"competitors": ["beta.io"]})

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"
        assert any(d.startswith("brand") for d in response.json()["details"])

    def test_malformed_json(self, client):
        response = client.post(
            ANALYZE_URL,
            content="{not json",
            headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to perform brand analysis"}

    def test_rate_limit(self, client):
        body = {"brand": "acme.com", "competitors": []}
        headers = {"X-Forwarded-For": "203.0.113.7, 10.0.0.1"}

        statuses = [client.post(ANALYZE_URL, json=body, headers=headers).status_code for _ in range(5)]
        limited = client.post(ANALYZE_URL, json=body, headers=headers)

        assert statuses == [200] * 5
        assert limited.status_code == 429
        assert limited.json()["error"] == "Rate limit exceeded"
        assert "resetTime" in limited.json()
        assert limited.headers["X-Error-Code"] == "RATE_LIMIT_EXCEEDED"

        # Another client still has quota
        other = client.post(ANALYZE_URL, json=body, headers={"X-Forwarded-For": "198.51.100.1"})
        assert other.status_code == 200

    def test_invalid_requests_do_not_consume_quota(self, client):
        bad = {"brand": "shop.io", "competitors": ["shop.io"]}
        for _ in range(6):
            assert client.post(ANALYZE_URL, json=bad).status_code == 400

        assert client.post(ANALYZE_URL, json={"brand": "acme.com"}).status_code == 200

    def test_demo_when_no_providers(self, app, client):
        app.dependency_overrides[get_providers] = lambda: []

        response = client.post(ANALYZE_URL, json={"brand": "acme.com", "competitors": ["beta.io"]})

        assert response.status_code == 200
        data = response.json()
        assert data["demo"] is True
        assert data["analysisMetadata"]["providersQueried"] == ["ChatGPT", "Claude", "Gemini", "Perplexity"]
        assert len(data["aiProviderResponses"]) == 8

    def test_provider_failure_degrades(self, app, client):
        flaky = FailingProvider("openai", "ChatGPT", "gpt-4o-mini", fail_on=[1], reply="acme.com is great")
        app.dependency_overrides[get_providers] = lambda: [flaky]

        response = client.post(ANALYZE_URL, json={"brand": "acme.com", "competitors": ["beta.io"]})

        assert response.status_code == 200
        records = response.json()["aiProviderResponses"]
        assert len(records) == 3
        assert records[0]["confidence"] == 0
        assert records[0]["sentiment"] == "neutral"
        assert records[0]["response"] == "Error: Unable to get response from ChatGPT"
        assert records[0]["competitorMentions"] == [{"name": "beta.io", "mentioned": False, "position": None}]
        assert [r["brandMentioned"] for r in records[1:]] == [True, True]
        assert response.json()["overallVisibilityScore"] == 67

    def test_unexpected_error_returns_500(self, app, client, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("src.routes.brand_analysis_routes.execute_brand_analysis", explode)

        response = client.post(ANALYZE_URL, json={"brand": "acme.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to perform brand analysis"}


class TestHealthEndpoints:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ("healthy", "demo")
        assert [p["id"] for p in data["providers"]] == ["openai", "anthropic", "google", "perplexity"]
        assert "displayName" in data["providers"][0]

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["endpoints"]["analyze"] == ANALYZE_URL
