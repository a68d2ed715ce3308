"""
Tests for logging and validation helpers.
"""

import json
import logging

from storefront.utils.logger import JSONFormatter, hash_email
from storefront.utils.validators import parse_bool_param, validate_secret


def test_hash_email_normalizes():
    assert hash_email(" Buyer@Example.com ") == hash_email("buyer@example.com")
    assert len(hash_email("buyer@example.com")) == 12
    assert hash_email("") == ""


def test_validate_secret():
    assert validate_secret("abc", "abc") is True
    assert validate_secret("abc", "abd") is False
    assert validate_secret("", "") is False
    assert validate_secret("abc", None) is False


def test_parse_bool_param():
    assert parse_bool_param(None) is None
    assert parse_bool_param("true") is True
    assert parse_bool_param("TRUE") is True
    assert parse_bool_param("1") is False


def test_json_formatter_includes_context():
    record = logging.LogRecord("storefront.test", logging.INFO, __file__, 1, "Email sent", None, None)
    record.extra_data = {"recipient_hash": "abc123"}

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Email sent"
    assert data["level"] == "INFO"
    assert data["recipient_hash"] == "abc123"
    assert data["timestamp"].endswith("Z")
