"""
Tests for the httpx adapters, using httpx.MockTransport instead of a live API.
"""

from __future__ import annotations

import json

import httpx
import pytest

from request_composer.application.exceptions import (
    CatalogUnavailableError,
    SubmissionRejectedError,
    SubmissionUpstreamError,
)
from request_composer.infrastructure.service_requests.catalog_client import CATALOG_PATH, HttpServiceCatalog
from request_composer.infrastructure.service_requests.connectivity import HttpConnectivityProbe
from request_composer.infrastructure.service_requests.service_requests_client import ServiceRequestsClient

BASE_URL = "http://api.test/api"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), base_url=BASE_URL)


def test_send_posts_json_and_returns_body():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"success": True, "request_id": 12})

    client = ServiceRequestsClient(BASE_URL, client=_client(handler))
    body = client.send("POST", "/service-requests", {"formData": {"name": "A"}})

    assert body == {"success": True, "request_id": 12}
    assert seen == {"method": "POST", "path": "/api/service-requests", "body": {"formData": {"name": "A"}}}


def test_send_maps_client_errors_to_rejection():
    def handler(request):
        return httpx.Response(400, json={"message": ["property foo should not exist", "name is required"]})

    client = ServiceRequestsClient(BASE_URL, client=_client(handler))
    with pytest.raises(SubmissionRejectedError) as excinfo:
        client.send("POST", "/service-requests", {})
    assert excinfo.value.status_code == 400
    assert str(excinfo.value) == "property foo should not exist; name is required"


def test_send_maps_server_and_network_errors_to_upstream():
    client = ServiceRequestsClient(BASE_URL, client=_client(lambda request: httpx.Response(502, text="bad gateway")))
    with pytest.raises(SubmissionUpstreamError):
        client.send("POST", "/service-requests", {})

    def offline(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = ServiceRequestsClient(BASE_URL, client=_client(offline))
    with pytest.raises(SubmissionUpstreamError):
        client.send("POST", "/service-requests", {})


def test_send_empty_body_counts_as_success():
    client = ServiceRequestsClient(BASE_URL, client=_client(lambda request: httpx.Response(204)))
    assert client.send("PUT", "/service-requests/4", {}) == {"success": True}


def test_catalog_client_parses_and_caches():
    calls = []
    payload = {
        "success": True,
        "services": [
            {
                "id": 1,
                "code": "EDS",
                "category": "Estudios de suelos",
                "items": [
                    {
                        "id": 101,
                        "code": "EDS-1",
                        "name": "Estudio de suelos",
                        "additionalInfo": [
                            {"field": "tieneSotano", "type": "radio", "options": ["Sí", "No"]},
                            {
                                "field": "nivelesSotano",
                                "type": "number",
                                "required": True,
                                "dependsOn": {"field": "tieneSotano", "value": "Sí"},
                            },
                        ],
                    }
                ],
            }
        ],
    }

    def handler(request):
        calls.append(request.url.path)
        return httpx.Response(200, json=payload)

    catalog = HttpServiceCatalog(BASE_URL, client=_client(handler))
    item = catalog.get_item("eds-1")
    assert item.id == 101
    assert item.additional_info[1].depends_on.value == "Sí"
    assert catalog.get_item("nope") is None
    assert calls == ["/api" + CATALOG_PATH]


def test_catalog_client_failure_raises():
    catalog = HttpServiceCatalog(BASE_URL, client=_client(lambda request: httpx.Response(500)))
    with pytest.raises(CatalogUnavailableError):
        catalog.list_categories()


def test_connectivity_probe():
    def online(request):
        return httpx.Response(404)

    def offline(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert HttpConnectivityProbe(BASE_URL, client=_client(online)).is_online() is True
    assert HttpConnectivityProbe(BASE_URL, client=_client(offline)).is_online() is False
