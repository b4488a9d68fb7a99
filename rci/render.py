"""Message rendering from the response body."""

import json
import logging

from rci.client import ProbeResponse
from rci.mapping import MappingRule
from rci.template import TemplateRenderError
from rci.utils.error import ResponseDecodeError

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def default_message(response: ProbeResponse) -> str:
    """Status line for errors, nothing for success codes."""
    if response.is_success:
        return ""
    return response.status_line


def decode_body(response: ProbeResponse):
    """Decode the whole response body as a single JSON value.

    Raises:
        ResponseDecodeError: If the body is not valid JSON.
    """
    try:
        return json.loads(response.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseDecodeError(f"Cannot process JSON response: {e}")


def render_message(rule: MappingRule, response: ProbeResponse, default: str) -> str:
    """Produce the message for a selected rule.

    The template is only evaluated for ``application/json`` responses. A
    body that fails to decode is fatal; an expression that does not resolve
    falls back to default.
    """
    if rule.template is None:
        return default

    if response.content_type != JSON_CONTENT_TYPE:
        logger.debug("Content-Type is %r, template not evaluated", response.content_type)
        return default

    document = decode_body(response)
    try:
        return rule.template.render(document)
    except TemplateRenderError as e:
        logger.debug("Template fallback to default message: %s", e)
        return default
