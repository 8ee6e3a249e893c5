#!/usr/bin/env python3
"""Tests for JSON-RPC envelope parsing, validation and response helpers."""

import pytest

from base_mcp_server.constants import JsonRpcError
from base_mcp_server.errors import InvalidRequestError, ParseError, SessionNotFoundError
from base_mcp_server.protocol.messages import (
    error_from_exception,
    error_response,
    is_notification,
    parse_message,
    request_id,
    success_response,
    validate_envelope,
)


class TestParseMessage:
    def test_valid_object(self):
        assert parse_message(b'{"jsonrpc": "2.0", "id": 1, "method": "ping"}') == {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "ping",
        }

    def test_accepts_str(self):
        assert parse_message('{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("body", [b"", b"   ", b"{not json", b'{"a": 1'])
    def test_parse_errors(self, body):
        with pytest.raises(ParseError) as exc_info:
            parse_message(body)
        assert exc_info.value.code == JsonRpcError.PARSE_ERROR

    def test_batch_rejected(self):
        with pytest.raises(InvalidRequestError, match="batch"):
            parse_message(b'[{"jsonrpc": "2.0", "id": 1, "method": "ping"}]')

    @pytest.mark.parametrize("body", [b'"text"', b"42", b"null"])
    def test_non_object_rejected(self, body):
        with pytest.raises(InvalidRequestError):
            parse_message(body)


class TestValidateEnvelope:
    @pytest.mark.parametrize(
        "message",
        [
            {"jsonrpc": "2.0", "id": 1, "method": "ping"},
            {"jsonrpc": "2.0", "id": "abc", "method": "ping", "params": {}},
            {"jsonrpc": "2.0", "id": None, "method": "ping", "params": []},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
        ],
    )
    def test_valid(self, message):
        validate_envelope(message)

    @pytest.mark.parametrize(
        "message",
        [
            {"id": 1, "method": "ping"},
            {"jsonrpc": "1.0", "id": 1, "method": "ping"},
            {"jsonrpc": "2.0", "id": 1},
            {"jsonrpc": "2.0", "id": 1, "method": ""},
            {"jsonrpc": "2.0", "id": 1, "method": 5},
            {"jsonrpc": "2.0", "id": True, "method": "ping"},
            {"jsonrpc": "2.0", "id": 1.5, "method": "ping"},
            {"jsonrpc": "2.0", "id": {"x": 1}, "method": "ping"},
            {"jsonrpc": "2.0", "id": 1, "method": "ping", "params": "x"},
        ],
    )
    def test_invalid(self, message):
        with pytest.raises(InvalidRequestError) as exc_info:
            validate_envelope(message)
        assert exc_info.value.code == JsonRpcError.INVALID_REQUEST


class TestHelpers:
    def test_is_notification(self):
        assert is_notification({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert not is_notification({"jsonrpc": "2.0", "id": None, "method": "ping"})

    def test_request_id(self):
        assert request_id({"id": 7}) == 7
        assert request_id({"id": "x"}) == "x"
        assert request_id({"id": True}) is None
        assert request_id({}) is None
        assert request_id(None) is None

    def test_success_response(self):
        assert success_response(3, {"ok": True}) == {"jsonrpc": "2.0", "id": 3, "result": {"ok": True}}

    def test_error_response_with_data(self):
        assert error_response("a", -32602, "bad", {"field": "x"}) == {
            "jsonrpc": "2.0",
            "id": "a",
            "error": {"code": -32602, "message": "bad", "data": {"field": "x"}},
        }

    def test_error_from_exception(self):
        response = error_from_exception(None, SessionNotFoundError("abc"))
        assert response["error"] == {"code": -32001, "message": "Session not found"}
        assert response["id"] is None
        assert "result" not in response
