"""
Security and request validation utilities.
"""

import secrets
from typing import Any, Optional


def validate_secret(provided: Optional[str], expected: Optional[str]) -> bool:
    """
    Compare a shared secret in constant time.

    An unset expected secret rejects everything, so a misconfigured
    deployment never accepts anonymous calls.

    Args:
        provided: Secret sent by the caller
        expected: Secret from configuration

    Returns:
        True if both are set and equal
    """
    if not provided or not expected:
        return False

    return secrets.compare_digest(provided, expected)


def validate_webhook_secret(provided_token: Optional[str]) -> bool:
    """
    Validate the X-Webhook-Token header against WEBHOOK_SECRET.

    Args:
        provided_token: Token from X-Webhook-Token header

    Returns:
        True if valid, False otherwise
    """
    from flask import current_app

    return validate_secret(provided_token, current_app.config.get('WEBHOOK_SECRET'))


def parse_bool_param(value: Any) -> Optional[bool]:
    """
    Interpret an optional boolean query parameter.

    Only the string "true" counts as true; absence means "no filter".

    Args:
        value: Raw query value or None

    Returns:
        True, False, or None when the parameter was not sent
    """
    if value is None:
        return None

    if isinstance(value, str):
        return value.lower() == 'true'

    return bool(value)
