"""
Unit Tests - Logging
"""
from storefront.config.logging import redact_secrets


def test_secrets_are_masked():
    event = redact_secrets(None, "info", {"event": "Login", "password": "hunter2", "customer_id": 3})

    assert event == {"event": "Login", "password": "***", "customer_id": 3}


def test_events_without_secrets_untouched():
    event = {"event": "Order created", "order_id": 1}

    assert redact_secrets(None, "info", dict(event)) == event
