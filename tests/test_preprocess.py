# ============================================================================
# PRE-PROCESS TESTS
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Tests - HTTP processing stage of trait templates
# PURPOSE: Verify request construction, response filling and failures
# CREATED: 19 OCT 2026
# ============================================================================
"""
Pre-Process Tests

Covers:
1. No `processing.http` -> instance returned unchanged
2. GET with headers/timeout, JSON response filled into processing.output
3. POST with a structured body
4. Failures: missing url, transport error, HTTP error, non-JSON body

Run with:
    pytest tests/test_preprocess.py -v
"""

import json

import httpx
import pytest
from unittest.mock import MagicMock, patch

from core.errors import PreProcessError
from engine import compile_source
from process import HttpPreProcessor


IP_TEMPLATE = """
processing:
  output: {}
  http:
    method: GET
    url: "http://ip-service/ip"
    request:
      header:
        Accept: application/json
      timeout: 5
output:
  apiVersion: v1
  kind: ConfigMap
  data:
    ip: "{{ processing.output.myIP }}"
"""


def _response(status_code=200, body=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = body
    resp.text = json.dumps(body)
    return resp


@pytest.fixture
def mock_http():
    """Patch httpx.Client; yields (client class, client)."""
    with patch("process.preprocess.httpx.Client") as client_cls:
        yield client_cls, client_cls.return_value.__enter__.return_value


class TestHttpPreProcessor:
    """Test the HTTP processing stage."""

    def test_no_http_declaration(self, mock_http):
        client_cls, _ = mock_http
        instance = compile_source("processing:\n  output: {}\n")

        assert HttpPreProcessor().transform(instance) is instance
        client_cls.assert_not_called()

    def test_get_fills_output(self, mock_http):
        client_cls, client = mock_http
        client.request.return_value = _response(200, {"myIP": "203.0.113.7"})

        result = HttpPreProcessor().transform(compile_source(IP_TEMPLATE))

        assert result.lookup("output.data.ip").as_string() == "203.0.113.7"
        client.request.assert_called_once_with(
            "GET",
            "http://ip-service/ip",
            headers={"Accept": "application/json"},
            content=None,
        )
        assert client_cls.call_args.kwargs["timeout"] == 5.0

    def test_post_with_struct_body(self, mock_http):
        _, client = mock_http
        client.request.return_value = _response(200, {"id": 1})
        template = (
            "processing:\n  output: {}\n  http:\n    method: post\n"
            "    url: http://registry/items\n    request:\n      body:\n        name: web\n"
        )

        result = HttpPreProcessor().transform(compile_source(template))

        args, kwargs = client.request.call_args
        assert args == ("POST", "http://registry/items")
        assert json.loads(kwargs["content"]) == {"name": "web"}
        assert result.lookup("processing.output.id").as_int() == 1

    def test_missing_url(self, mock_http):
        instance = compile_source("processing:\n  http:\n    method: GET\n")
        with pytest.raises(PreProcessError):
            HttpPreProcessor().transform(instance)

    def test_transport_error(self, mock_http):
        _, client = mock_http
        client.request.side_effect = httpx.ConnectError("no route")
        with pytest.raises(PreProcessError):
            HttpPreProcessor().transform(compile_source(IP_TEMPLATE))

    def test_http_error_status(self, mock_http):
        _, client = mock_http
        client.request.return_value = _response(503, {"error": "unavailable"})
        with pytest.raises(PreProcessError) as exc_info:
            HttpPreProcessor().transform(compile_source(IP_TEMPLATE))
        assert "503" in str(exc_info.value)

    def test_non_json_body(self, mock_http):
        _, client = mock_http
        resp = _response(200, None)
        resp.json.side_effect = ValueError("Expecting value")
        client.request.return_value = resp
        with pytest.raises(PreProcessError):
            HttpPreProcessor().transform(compile_source(IP_TEMPLATE))

    def test_conflicting_output(self, mock_http):
        _, client = mock_http
        client.request.return_value = _response(200, {"myIP": "b"})
        template = IP_TEMPLATE.replace("  output: {}", "  output:\n    myIP: a")
        with pytest.raises(PreProcessError):
            HttpPreProcessor().transform(compile_source(template))
