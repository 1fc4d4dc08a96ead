"""
Tests for the Mosaic API client
"""

import json

import httpx
import pytest

from core.mosaic import MosaicAPIError, MosaicClient


def make_client(handler, base_url="https://mosaic.test/api/v1"):
    return MosaicClient("secret-token", base_url=base_url, transport=httpx.MockTransport(handler))


class TestMosaicClient:
    """Test suite for MosaicClient"""

    def test_request_sends_bearer_token(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            return httpx.Response(200, json=[{"id": 1}])

        with make_client(handler) as client:
            response = client.request("GET", "/projects/42/samples")

        assert seen["auth"] == "Bearer secret-token"
        assert seen["url"] == "https://mosaic.test/api/v1/projects/42/samples"
        assert response.status == 200
        assert response.ok
        assert response.body == [{"id": 1}]

    def test_request_non_json_body(self):
        def handler(request: httpx.Request):
            return httpx.Response(502, text="Bad Gateway")

        response = make_client(handler).request("GET", "/projects/42/samples")

        assert response.status == 502
        assert not response.ok
        assert response.body == "Bad Gateway"

    def test_put_sends_json(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["method"] = request.method
            seen["content_type"] = request.headers["Content-Type"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": 3})

        body = make_client(handler).put(
            "/projects/42/samples/7/files/3", {"uri": "file:///data/S1.cram"}
        )

        assert seen == {
            "method": "PUT",
            "content_type": "application/json",
            "body": {"uri": "file:///data/S1.cram"},
        }
        assert body == {"id": 3}

    def test_get_raises_on_error_status(self):
        def handler(request: httpx.Request):
            return httpx.Response(401, json={"message": "Unauthorized"})

        with pytest.raises(MosaicAPIError) as exc_info:
            make_client(handler).get("/projects/42/samples")

        assert exc_info.value.status == 401
        assert exc_info.value.body == {"message": "Unauthorized"}
        assert "GET /projects/42/samples" in str(exc_info.value)

    def test_transport_error_propagates(self):
        def handler(request: httpx.Request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(httpx.HTTPError):
            make_client(handler).get("/projects/42/samples")

    def test_trailing_slash_in_base_url(self):
        def handler(request: httpx.Request):
            return httpx.Response(200, json=[])

        client = make_client(handler, base_url="https://mosaic.test/api/v1/")
        assert client.base_url == "https://mosaic.test/api/v1"
