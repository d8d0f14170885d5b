"""
Unit tests for the OSSign API client.
"""

import json
import logging

import pytest
import requests
from unittest.mock import Mock, patch

from signdispatch.domain.exceptions import ProtocolError, RemoteCallError, TransientError
from signdispatch.domain.models import ApiFailure, ApiSuccess, DispatchRequest
from signdispatch.infrastructure.ossign.client import OSSignClient, parse_api_response


def make_response(payload=None, status_code=200, reason="OK", text=None):
    """Build a fake requests.Response."""
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.reason = reason
    response.ok = status_code < 400
    if text is None:
        text = json.dumps(payload)
    response.text = text
    if payload is None:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def client():
    return OSSignClient(token="secret-token", api_base="https://api.example.test/api/v1/")


class TestParseApiResponse:
    """Test tagged result classification."""

    def test_snapshot(self):
        result = parse_api_response({"id": "wf-1", "completed": False})

        assert isinstance(result, ApiSuccess)
        assert result.kind == "ok"
        assert result.snapshot.id == "wf-1"

    def test_error_envelope(self):
        result = parse_api_response({"message": "Unauthorized"})

        assert isinstance(result, ApiFailure)
        assert result.kind == "error"
        assert result.message == "Unauthorized"

    def test_non_object_rejected(self):
        with pytest.raises(ProtocolError, match="list"):
            parse_api_response([1, 2])

    def test_wrong_field_types_rejected(self):
        with pytest.raises(ProtocolError):
            parse_api_response({"id": "wf-1", "workflow_run_id": "not-a-number"})


class TestOSSignClientBasic:
    """Test client construction."""

    def test_initialization(self, client):
        assert client.api_base == "https://api.example.test/api/v1"
        assert client.timeout == 60.0
        assert client.session.headers["Authorization"] == "Bearer secret-token"

    def test_default_api_base(self):
        client = OSSignClient(token="t")

        assert client.api_base == "https://api.ossign.org/api/v1"

    def test_requires_token(self):
        with pytest.raises(ValueError, match="token"):
            OSSignClient(token="  ")

    def test_rejects_unknown_check_endpoint(self):
        with pytest.raises(ValueError, match="check endpoint"):
            OSSignClient(token="t", check_endpoint="poll")

    def test_context_manager_closes_session(self):
        session = Mock()
        session.headers = {}

        with OSSignClient(token="t", session=session):
            pass

        session.close.assert_called_once()


class TestOSSignClientCalls:
    """Test request construction and response handling."""

    def test_dispatch_request(self, client):
        request = DispatchRequest(source_branch="main", release_name="Ref: main - now")

        with patch.object(client.session, "request", return_value=make_response({"id": "wf-1"})) as mock_request:
            status = client.dispatch("acme", request)

        assert status.id == "wf-1"
        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://api.example.test/api/v1/dispatch/acme")
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert json.loads(kwargs["data"]) == {
            "source_branch": "main",
            "release_name": "Ref: main - now",
        }
        assert kwargs["timeout"] == 60.0

    def test_check_request_has_no_body(self, client):
        payload = {"id": "wf-1", "last_status": "signing", "completed": False}

        with patch.object(client.session, "request", return_value=make_response(payload)) as mock_request:
            status = client.check("acme", "wf-1")

        assert status.last_status == "signing"
        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://api.example.test/api/v1/check/acme/wf-1")
        assert "data" not in kwargs
        assert "headers" not in kwargs

    def test_status_endpoint_variant(self):
        client = OSSignClient(token="t", check_endpoint="status")

        with patch.object(client.session, "request", return_value=make_response({"id": "wf-1"})) as mock_request:
            client.check("acme", "wf-1")

        assert mock_request.call_args[0][1] == "https://api.ossign.org/api/v1/status/acme/wf-1"

    def test_http_error_raises_remote_call_error(self, client):
        response = make_response(status_code=500, reason="Internal Server Error", text="boom")

        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(RemoteCallError) as exc_info:
                client.check("acme", "wf-1")

        error = exc_info.value
        assert error.status_code == 500
        assert error.reason == "Internal Server Error"
        assert error.body == "boom"
        assert str(error) == "500 Internal Server Error - boom"

    def test_long_error_body_truncated(self, client):
        response = make_response(status_code=502, reason="Bad Gateway", text="x" * 2000)

        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(RemoteCallError) as exc_info:
                client.check("acme", "wf-1")

        assert len(exc_info.value.body) == 500

    def test_error_envelope_on_success_status(self, client):
        response = make_response({"message": "Workflow not found"})

        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(RemoteCallError, match="Workflow not found") as exc_info:
                client.check("acme", "wf-404")

        assert exc_info.value.status_code == 200

    def test_unparseable_last_checked_tolerated(self, client):
        payload = {
            "id": "wf-1",
            "completed": True,
            "last_checked": "Mon, 02 Jan 2026 15:04:05 UTC",
            "release_assets": [
                {"id": "a1", "name": "pkg.exe", "url": "u", "browser_download_url": "b"}
            ],
        }

        with patch.object(client.session, "request", return_value=make_response(payload)):
            status = client.check("acme", "wf-1")

        assert status.is_completed is True
        assert status.last_checked is None
        assert [a.name for a in status.assets] == ["pkg.exe"]

    def test_partial_assets_ignored_while_running(self, client):
        payload = {"id": "wf-1", "completed": False, "release_assets": [{"id": "a1", "name": "pkg.exe"}]}

        with patch.object(client.session, "request", return_value=make_response(payload)):
            status = client.check("acme", "wf-1")

        assert status.is_completed is False
        assert status.release_assets is None
        assert status.assets == []

    def test_partial_assets_rejected_once_completed(self, client):
        payload = {"id": "wf-1", "completed": True, "release_assets": [{"id": "a1", "name": "pkg.exe"}]}

        with patch.object(client.session, "request", return_value=make_response(payload)):
            with pytest.raises(ProtocolError, match="release_assets"):
                client.check("acme", "wf-1")

    def test_invalid_json_raises_protocol_error(self, client):
        response = make_response(text="<html>maintenance</html>")

        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(ProtocolError, match="not valid JSON"):
                client.check("acme", "wf-1")

    def test_timeout_is_transient(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.ReadTimeout("slow")):
            with pytest.raises(TransientError, match="timed out"):
                client.check("acme", "wf-1")

    def test_connection_error_is_transient(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.ConnectionError("reset")):
            with pytest.raises(TransientError, match="Connection"):
                client.check("acme", "wf-1")

    def test_other_request_errors_are_fatal(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.InvalidURL("bad")):
            with pytest.raises(RemoteCallError):
                client.check("acme", "wf-1")

    def test_raw_response_logged_at_debug(self, client, caplog):
        with patch.object(client.session, "request", return_value=make_response({"id": "wf-1"})):
            with caplog.at_level(logging.DEBUG, logger=client.logger.name):
                client.check("acme", "wf-1")

        assert 'Response from API check/acme/wf-1: {"id": "wf-1"}' in caplog.text
        assert "secret-token" not in caplog.text
