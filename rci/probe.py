"""The probe pipeline: request, classify, render.

Functions here return values and raise ProbeError subclasses; printing and
exiting is left to rci.cli.
"""

from dataclasses import dataclass

from rci.client import ProbeResponse, send_request
from rci.config import ProbeSettings
from rci.dispatch import DispatchKind, dispatch
from rci.mapping import MappingTable, parse_mapping
from rci.render import default_message, render_message
from rci.utils.error import ConfigError
from rci.utils.exit_codes import GENERAL_ERROR, SUCCESS
from rci.utils.file_input import resolve_request_body


@dataclass(frozen=True)
class ProbeOutcome:
    """Final result of a run. A message of None means print nothing."""

    message: str | None
    exit_code: int


def evaluate_response(response: ProbeResponse, table: MappingTable) -> ProbeOutcome:
    """Turn a response into a message and exit code using table."""
    result = dispatch(response.status_code, table)

    if result.kind is DispatchKind.NO_ACTION:
        return ProbeOutcome(None, SUCCESS)

    if result.kind is DispatchKind.UNMAPPED:
        return ProbeOutcome(f"Unexpected response: {response.status_line}", GENERAL_ERROR)

    message = render_message(result.rule, response, default_message(response))
    return ProbeOutcome(message, result.rule.exit_code)


def run_probe(settings: ProbeSettings) -> ProbeOutcome:
    """Run the whole pipeline for settings.

    Raises:
        ProbeError: On an invalid mapping, missing URL, unreadable body,
            transport failure or undecodable JSON body.
    """
    table = parse_mapping(settings.response_map)

    if not settings.url:
        raise ConfigError("No url provided", "Pass the target with -a URL or set RCI_URL")

    body = resolve_request_body(settings.method, settings.body)
    response = send_request(settings, body)
    return evaluate_response(response, table)
