"""HTTP client wrapper issuing the single probe request."""

import logging
from dataclasses import dataclass

import httpx

from rci.config import ProbeSettings
from rci.utils.error import TransportError

logger = logging.getLogger(__name__)

# Fixed request timeout in seconds
REQUEST_TIMEOUT = 60.0


@dataclass(frozen=True)
class ProbeResponse:
    """The parts of an HTTP response the mapping engine looks at."""

    status_code: int
    reason: str = ""
    content_type: str = ""
    body: bytes = b""

    @property
    def status_line(self) -> str:
        """Status text such as ``404 Not Found``."""
        if self.reason:
            return f"{self.status_code} {self.reason}"
        return str(self.status_code)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "ProbeResponse":
        return cls(
            status_code=response.status_code,
            reason=response.reason_phrase,
            content_type=response.headers.get("content-type", ""),
            body=response.content,
        )


def send_request(
    settings: ProbeSettings,
    body: bytes | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ProbeResponse:
    """Issue the request described by settings and buffer the response.

    Redirects are not followed: a 3xx answer is classified like any other
    status code.

    Args:
        settings: Probe settings (URL and method).
        body: Request body, already read into memory.
        transport: Optional httpx transport (used by tests).

    Raises:
        TransportError: If the request cannot be built or fails in flight.
    """
    logger.debug("%s %s", settings.method, settings.url)
    try:
        with httpx.Client(timeout=REQUEST_TIMEOUT, transport=transport) as client:
            request = client.build_request(settings.method, settings.url, content=body)
            response = client.send(request)
    except httpx.TimeoutException as e:
        raise TransportError(
            f"Request timed out after {REQUEST_TIMEOUT:g}s: {e}",
            "Check that the target is reachable",
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"Cannot execute request: {e}")

    logger.debug("Response: %d %s", response.status_code, response.reason_phrase)
    return ProbeResponse.from_httpx(response)
