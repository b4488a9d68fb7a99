"""Tests for the probe pipeline."""

from unittest.mock import patch

import pytest

from rci.config import ProbeSettings
from rci.mapping import parse_mapping
from rci.probe import ProbeOutcome, evaluate_response, run_probe
from rci.utils.error import (
    BodyInputError,
    ConfigError,
    MappingSpecError,
    ResponseDecodeError,
    TransportError,
)
from tests.conftest import create_json_response, create_response


class TestEvaluateResponse:
    """End-to-end outcomes for a response and a mapping spec."""

    def test_success_without_mapping(self):
        outcome = evaluate_response(create_response(200, "OK"), parse_mapping(""))
        assert outcome == ProbeOutcome(None, 0)

    def test_exact_rule_for_non_json_prints_status_line(self):
        response = create_response(404, "Not Found", b"<html/>", "text/html")
        outcome = evaluate_response(response, parse_mapping("404=3"))
        assert outcome == ProbeOutcome("404 Not Found", 3)

    def test_template_rendered_from_json(self):
        response = create_json_response(200, {"message": "ok"}, reason="OK")
        outcome = evaluate_response(response, parse_mapping("200=0:{.message}"))
        assert outcome == ProbeOutcome("ok", 0)

    def test_5xx_wildcard(self):
        response = create_response(503, "Service Unavailable")
        outcome = evaluate_response(response, parse_mapping("5XX=2"))
        assert outcome == ProbeOutcome("503 Service Unavailable", 2)

    def test_missing_path_gives_default(self):
        response = create_json_response(200, {}, reason="OK")
        outcome = evaluate_response(response, parse_mapping("200=0:{.missing}"))
        assert outcome == ProbeOutcome("", 0)

    def test_unmapped_redirect(self):
        response = create_response(301, "Moved Permanently")
        outcome = evaluate_response(response, parse_mapping(""))
        assert outcome.exit_code == 1
        assert "301" in outcome.message
        assert "Moved Permanently" in outcome.message

    def test_unmapped_client_error(self):
        outcome = evaluate_response(create_response(418, "I'm a teapot"), parse_mapping("5XX=2"))
        assert outcome == ProbeOutcome("Unexpected response: 418 I'm a teapot", 1)

    def test_non_zero_success_code(self):
        outcome = evaluate_response(create_response(202, "Accepted"), parse_mapping("2XX=4"))
        assert outcome == ProbeOutcome("", 4)

    def test_exact_over_wildcard(self):
        table = parse_mapping("404=1;4XX=2")
        assert evaluate_response(create_response(404, "Not Found"), table).exit_code == 1
        assert evaluate_response(create_response(403, "Forbidden"), table).exit_code == 2

    def test_range_template_over_json_items(self):
        response = create_json_response(
            500, {"items": [{"name": "a"}, {"name": "b"}]}, reason="Internal Server Error"
        )
        table = parse_mapping("5XX=2:{range .items[*]}{.name} {end}")
        assert evaluate_response(response, table) == ProbeOutcome("a b ", 2)

    def test_decode_failure_propagates(self):
        response = create_response(500, "Internal Server Error", b"oops", "application/json")
        with pytest.raises(ResponseDecodeError):
            evaluate_response(response, parse_mapping("5XX=2:{.error}"))


class TestRunProbe:
    """Test suite for run_probe."""

    def test_runs_request_and_evaluates(self):
        settings = ProbeSettings(url="http://example.test/health", response_map="5XX=2")
        response = create_response(502, "Bad Gateway")

        with patch("rci.probe.send_request", return_value=response) as mock_send:
            outcome = run_probe(settings)

        mock_send.assert_called_once_with(settings, None)
        assert outcome == ProbeOutcome("502 Bad Gateway", 2)

    def test_mapping_checked_before_url(self):
        settings = ProbeSettings(url="", response_map="404")
        with patch("rci.probe.send_request") as mock_send:
            with pytest.raises(MappingSpecError):
                run_probe(settings)
        mock_send.assert_not_called()

    def test_missing_url(self):
        with patch("rci.probe.send_request") as mock_send:
            with pytest.raises(ConfigError, match="No url provided"):
                run_probe(ProbeSettings())
        mock_send.assert_not_called()

    def test_post_sends_literal_body(self):
        settings = ProbeSettings(url="http://example.test", method="POST", body='{"a": 1}')
        with patch("rci.probe.send_request", return_value=create_response(201)) as mock_send:
            run_probe(settings)
        mock_send.assert_called_once_with(settings, b'{"a": 1}')

    def test_get_ignores_body(self):
        settings = ProbeSettings(url="http://example.test", body="@/does/not/exist")
        with patch("rci.probe.send_request", return_value=create_response(200)) as mock_send:
            run_probe(settings)
        mock_send.assert_called_once_with(settings, None)

    def test_unreadable_body_file(self, tmp_path):
        missing = tmp_path / "missing.json"
        settings = ProbeSettings(url="http://example.test", method="PUT", body=f"@{missing}")
        with patch("rci.probe.send_request") as mock_send:
            with pytest.raises(BodyInputError):
                run_probe(settings)
        mock_send.assert_not_called()

    def test_transport_error_propagates(self):
        settings = ProbeSettings(url="http://example.test")
        with patch("rci.probe.send_request", side_effect=TransportError("boom")):
            with pytest.raises(TransportError):
                run_probe(settings)
