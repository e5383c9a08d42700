"""Tests for the HTTP client."""

import pytest
import requests
import responses

from streamchat._exceptions import HttpError, TransportError
from streamchat._http import DEFAULT_USER_AGENT, HTTPClient, _error_detail
from tests.utils.mocks import SESSION_URL, STREAM_URL


class TestHTTPClient:
    @responses.activate
    def test_post_json_sends_json_headers(self, http):
        responses.add(responses.POST, SESSION_URL, json={"ok": True}, status=200)
        assert http.post_json(SESSION_URL, {"chatid": "c"}) == {"ok": True}
        headers = responses.calls[0].request.headers
        assert headers["Content-Type"] == "application/json"
        assert headers["User-Agent"] == DEFAULT_USER_AGENT

    @responses.activate
    def test_custom_user_agent(self):
        client = HTTPClient(user_agent="my-site/1.0")
        responses.add(responses.POST, SESSION_URL, json={}, status=200)
        client.post_json(SESSION_URL, {})
        assert responses.calls[0].request.headers["User-Agent"] == "my-site/1.0"

    @responses.activate
    def test_post_json_invalid_body_raises_value_error(self, http):
        responses.add(responses.POST, SESSION_URL, body="not json", status=200)
        with pytest.raises(ValueError):
            http.post_json(SESSION_URL, {})

    @responses.activate
    def test_open_stream_does_not_raise_on_status(self, http):
        responses.add(responses.POST, STREAM_URL, json={"detail": "nope"}, status=500)
        response = http.open_stream(STREAM_URL, {"message": "hi"})
        assert response.status_code == 500
        response.close()

    @responses.activate
    def test_open_stream_reads_body_incrementally(self, http):
        responses.add(responses.POST, STREAM_URL, body=b"data: {}\n\n", status=200)
        response = http.open_stream(STREAM_URL, {})
        assert b"".join(response.iter_content(chunk_size=None)) == b"data: {}\n\n"

    @responses.activate
    def test_connection_error_maps_to_transport_error(self, http):
        responses.add(responses.POST, STREAM_URL, body=requests.ConnectionError("refused"))
        with pytest.raises(TransportError) as exc_info:
            http.open_stream(STREAM_URL, {})
        assert exc_info.value.method == "POST"
        assert exc_info.value.url == STREAM_URL
        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


class TestErrorMapping:
    @responses.activate
    def test_detail_field_preferred(self, http):
        responses.add(responses.POST, SESSION_URL, json={"detail": "Unknown chat"}, status=404)
        with pytest.raises(HttpError) as exc_info:
            http.post_json(SESSION_URL, {})
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Unknown chat"
        assert exc_info.value.url == SESSION_URL

    @responses.activate
    def test_reason_phrase_fallback(self, http):
        responses.add(responses.POST, SESSION_URL, body="<html>", status=503)
        with pytest.raises(HttpError) as exc_info:
            http.post_json(SESSION_URL, {})
        assert exc_info.value.message == "Service Unavailable"

    def test_error_detail_default_when_no_reason(self):
        resp = requests.Response()
        resp.status_code = 502
        resp._content = b""
        resp.reason = ""
        assert _error_detail(resp, default="Failed to connect to stream") == (
            "Failed to connect to stream"
        )
        assert _error_detail(resp) == "HTTP 502"

    @responses.activate
    def test_json_body_without_detail_uses_status_code(self, http):
        responses.add(responses.POST, SESSION_URL, json={"error": "x"}, status=500)
        with pytest.raises(HttpError) as exc_info:
            http.post_json(SESSION_URL, {})
        assert exc_info.value.message == "HTTP 500"

    def test_json_body_without_detail_prefers_default_over_reason(self):
        resp = requests.Response()
        resp.status_code = 500
        resp._content = b'{"error": "x"}'
        resp.reason = "Internal Server Error"
        assert _error_detail(resp, default="Failed to connect to stream") == (
            "Failed to connect to stream"
        )
