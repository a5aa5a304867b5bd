"""
Test that client_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from client_logging and use the logger."""
    from lookup_client.client_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    logger.info("test_message", key="value")


def test_normalize_event():
    from lookup_client.client_logging.logger import _normalize_event

    out = _normalize_event(None, "info", {"event": "tx_sent"})
    assert out == {"event_type": "tx_sent"}
