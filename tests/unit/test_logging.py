"""Unit tests for the structured log formatter."""

import json
import logging

import pytest
from libs.common.logging import (
    JsonFormatter,
    clear_request_context,
    get_request_id,
    set_request_context,
)

pytestmark = pytest.mark.unit


def _record(message, **extra):
    record = logging.LogRecord("accounts.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_merges_extra_fields():
    record = _record("Agreement accepted", extra_fields={"user_id": "u-1"})

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Agreement accepted"
    assert payload["level"] == "INFO"
    assert payload["user_id"] == "u-1"
    assert "request_id" not in payload


def test_json_formatter_includes_request_context():
    set_request_context("req-9", "/users/me", "GET")
    try:
        payload = json.loads(JsonFormatter().format(_record("hello")))
    finally:
        clear_request_context()

    assert payload["request_id"] == "req-9"
    assert payload["path"] == "/users/me"
    assert payload["method"] == "GET"
    assert get_request_id() is None


def test_set_request_context_generates_id():
    try:
        request_id = set_request_context()
        assert request_id == get_request_id()
        assert len(request_id) == 32
    finally:
        clear_request_context()
