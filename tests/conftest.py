"""Shared test fixtures and utilities."""

import json
import logging

import pytest
from click.testing import CliRunner

from rci.client import ProbeResponse


@pytest.fixture
def runner():
    """Click CLI test runner.

    Example:
        def test_command(runner):
            result = runner.invoke(main, ['-a', 'http://example.test'])
            assert result.exit_code == 0
    """
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep RCI_* variables from the developer's shell out of the tests."""
    for name in ("URL", "METHOD", "BODY", "RESPONSE_MAP", "VERBOSE"):
        monkeypatch.delenv(f"RCI_{name}", raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() after each test."""
    yield
    logger = logging.getLogger("rci")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# Data factory functions for common test objects


def create_response(status_code, reason="", body=b"", content_type="text/plain"):
    """Factory function to create a ProbeResponse.

    Args:
        status_code: HTTP status code
        reason: Reason phrase (e.g. "Not Found")
        body: Raw body bytes
        content_type: Content-Type header value

    Returns:
        ProbeResponse
    """
    return ProbeResponse(
        status_code=status_code,
        reason=reason,
        content_type=content_type,
        body=body,
    )


def create_json_response(status_code, payload, reason=""):
    """Factory function for an application/json ProbeResponse."""
    return create_response(
        status_code,
        reason=reason,
        body=json.dumps(payload).encode("utf-8"),
        content_type="application/json",
    )
