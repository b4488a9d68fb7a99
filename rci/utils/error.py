"""Error types and the top-level error handling decorator."""

import logging
import sys
from functools import wraps

from rci.utils.exit_codes import GENERAL_ERROR
from rci.utils.output import emit_error

logger = logging.getLogger(__name__)


class ProbeError(Exception):
    """Base class for errors that terminate a probe run."""

    code = "PROBE_ERROR"

    def __init__(self, message: str, hint: str = "", exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.exit_code = exit_code


class ConfigError(ProbeError):
    """Missing or invalid settings (e.g. no target URL)."""

    code = "CONFIG_ERROR"


class MappingSpecError(ProbeError):
    """The response mapping specification was rejected."""

    code = "INVALID_MAPPING"

    def __init__(self, entry: str, reason: str):
        super().__init__(
            f"Invalid response mapping entry '{entry}': {reason}",
            "Expected CODE=EXIT_CODE or CODE=EXIT_CODE:TEMPLATE, "
            "CODE being a number, 2XX, 4XX or 5XX",
        )
        self.entry = entry
        self.reason = reason


class BodyInputError(ProbeError):
    """The request body file could not be read."""

    code = "BODY_INPUT_ERROR"


class TransportError(ProbeError):
    """The HTTP request could not be built or executed."""

    code = "TRANSPORT_ERROR"


class ResponseDecodeError(ProbeError):
    """A JSON response body required by a template failed to decode."""

    code = "DECODE_ERROR"


def handle_probe_error(func):
    """Decorator turning probe errors into a diagnostic and an exit code."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ProbeError as e:
            logger.debug("Probe failed with %s", e.code)
            emit_error(e.code, e.message, e.hint)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Unexpected failure", exc_info=True)
            emit_error("UNEXPECTED_ERROR", f"Unexpected error: {e}")
            sys.exit(GENERAL_ERROR)

    return wrapper
