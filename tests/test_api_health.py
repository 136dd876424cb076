"""Tests for API health and status endpoints.

This module tests the health check and root endpoints of the API.

Author: Pat G Cappelaere, IBM Federal Consulting
Created: 2026-10-18
Version: 1.0.0
License: MIT
"""

from lending_api.api_utils import services


def test_root_endpoint(test_client):
    """Test the root endpoint returns API information."""
    response = test_client.get("/")

    assert response.status_code == 200
    data = response.json()

    assert data["message"] == "Loan Intake & Review API"
    assert data["status"] == "operational"
    assert "version" in data
    assert data["stored_applications"] == 0


def test_root_endpoint_not_initialized(test_client):
    """Without a workflow the root endpoint reports 503."""
    services.clear()

    response = test_client.get("/")

    assert response.status_code == 503
    assert response.json()["error"] == "Service not initialized"


def test_health_check(test_client):
    """Test the enhanced health check endpoint."""
    response = test_client.get("/health")

    # Should return 200 for healthy or 503 for degraded
    assert response.status_code in [200, 503]
    data = response.json()

    assert data["status"] in ["healthy", "degraded"]
    assert "timestamp" in data

    checks = data["checks"]
    assert "workflow" in checks
    assert "disk_space" in checks
    assert "configuration" in checks

    workflow = checks["workflow"]
    assert workflow["status"] == "healthy"
    assert workflow["provider"] == "FakeDecisionProvider"
    assert workflow["stored_applications"] == 0
    assert workflow["pending_reviews"] == 0

    configuration = checks["configuration"]
    assert "status" in configuration
    assert isinstance(configuration["errors"], list)


def test_health_check_not_initialized(test_client):
    services.clear()

    response = test_client.get("/health")

    assert response.status_code == 503
    assert response.json()["checks"]["workflow"]["status"] == "unhealthy"


def test_openapi_lists_operations(test_client):
    """Test that the OpenAPI schema exposes the application endpoints."""
    response = test_client.get("/openapi.json")

    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/applications" in paths
    assert "/applications/{application_id}/override" in paths
    assert "/reviews/pending" in paths
