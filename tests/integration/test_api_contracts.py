"""
Integration Tests for API Contracts
===================================

HTTP-level tests for the FastAPI application running on the mock backend.
Tests request/response shapes, status codes and error bodies.
"""

import pytest
from fastapi import status

from ads_gateway.core.tools import TOOL_NAMES


def post_tool(client, name, params=None):
    body = {"name": name}
    if params is not None:
        body["params"] = params
    return client.post("/v1/tools", json=body)


class TestHealthEndpoints:
    """Test health and service information endpoints."""

    def test_health_check_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "ok"
        assert "running" in data["message"]

    def test_health_check_is_stable(self, client):
        post_tool(client, "launch_rocket")
        for _ in range(3):
            assert client.get("/health").json()["status"] == "ok"

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "Ads Tools Gateway"
        assert data["backend"] == "mock"
        assert "endpoints" in data

    def test_root_lists_tools_and_stream_stats(self, client):
        data = client.get("/").json()

        assert [tool["name"] for tool in data["tools"]] == TOOL_NAMES
        assert all(tool["description"] for tool in data["tools"])
        assert data["sse"]["total_connections"] == 0
        assert data["sse"]["connections_by_route"] == {}

    def test_root_reports_streams_opened(self, app, client):
        manager = app.state.sse_manager
        manager.total_opened = 4

        assert client.get("/").json()["sse"]["total_opened"] == 4

    def test_request_id_header(self, client):
        response = client.get("/health")
        assert response.headers["x-request-id"]


class TestToolExecution:
    """Test POST /v1/tools contracts."""

    def test_get_campaigns_with_limit(self, client):
        response = post_tool(client, "get_campaigns", {"limit": 2})

        assert response.status_code == status.HTTP_200_OK
        result = response.json()["result"]
        assert isinstance(result, list)
        assert len(result) <= 2
        for campaign in result:
            assert {"id", "name", "status"} <= campaign.keys()

    def test_params_default_to_empty(self, client):
        response = post_tool(client, "get_campaigns")

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["result"]) == 3

    def test_unknown_tool(self, client):
        response = post_tool(client, "launch_rocket", {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        error = response.json()["error"]
        assert error["code"] == "UNKNOWN_TOOL"
        assert "launch_rocket" in error["message"]

    def test_invalid_params(self, client):
        response = post_tool(client, "get_campaigns", {"limit": "many"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "INVALID_PARAMS"

    @pytest.mark.parametrize("budget", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_budget(self, client, budget):
        body = '{"name":"create_campaign","params":{"name":"x","daily_budget":' + budget + "}}"
        response = client.post(
            "/v1/tools", content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "INVALID_PARAMS"

    @pytest.mark.parametrize(
        "body",
        [{}, {"params": {}}, {"name": ""}, {"name": "get_campaigns", "params": [1, 2]}],
    )
    def test_malformed_body(self, client, body):
        response = client.post("/v1/tools", json=body)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_currency_round_trip(self, client):
        created = post_tool(
            client, "create_campaign", {"name": "Budgeted", "daily_budget": 12.34}
        )
        assert created.status_code == status.HTTP_200_OK
        campaign_id = created.json()["result"]["id"]

        details = post_tool(client, "get_campaign_details", {"campaign_id": campaign_id})

        assert details.status_code == status.HTTP_200_OK
        assert details.json()["result"]["dailyBudget"] == pytest.approx(12.34)

    def test_campaign_not_found(self, client):
        response = post_tool(client, "get_campaign_details", {"campaign_id": "does-not-exist"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_upstream_failure(self, client, mock_backend):
        async def broken(*args, **kwargs):
            raise RuntimeError("SDK exploded")

        mock_backend.get_insights = broken

        response = post_tool(client, "get_insights", {})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {
            "error": {"message": "Internal server error", "code": "INTERNAL_ERROR"}
        }

    def test_insights(self, client):
        response = post_tool(
            client, "get_insights", {"campaign_id": "120200000000000002", "fields": ["spend"]}
        )

        assert response.status_code == status.HTTP_200_OK
        assert list(response.json()["result"][0]) == ["spend"]


class TestCORS:
    """Test cross-origin access."""

    def test_preflight(self, client):
        response = client.options(
            "/v1/tools",
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["access-control-allow-origin"] == "*"

    def test_bare_options(self, client):
        response = client.options("/v1/tools")
        assert response.status_code == status.HTTP_200_OK

    def test_simple_request_allows_any_origin(self, client):
        response = client.get("/health", headers={"Origin": "https://anywhere.example"})
        assert response.headers["access-control-allow-origin"] == "*"


class TestErrorShape:
    def test_unknown_route(self, client):
        response = client.get("/nope")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["error"]["code"] == "NOT_FOUND"
