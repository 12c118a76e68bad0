"""HTTP transport for the self-hosted remote provider.

The provider talks to the network only through a transport callable, so
tests can swap in a fake. Network failures are reported in the result
instead of being raised.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass
class TransportResult:
    """Outcome of a single HTTP exchange."""

    status_code: int = 0
    body: str = ""
    transport_error: str = ""

    @property
    def ok(self) -> bool:
        return not self.transport_error and 200 <= self.status_code < 300


# (url, method, body, headers, timeout_ms) -> TransportResult
Transport = Callable[[str, str, str, dict[str, str], int], TransportResult]


def httpx_transport(
    url: str,
    method: str,
    body: str,
    headers: dict[str, str],
    timeout_ms: int,
) -> TransportResult:
    """Send a request with httpx.

    Args:
        url: Target URL
        method: HTTP method ("GET", "POST", ...)
        body: Request body, empty for none
        headers: Request headers
        timeout_ms: Timeout in milliseconds

    Returns:
        TransportResult with status and body, or ``transport_error`` set.
        Never raises.
    """
    try:
        with httpx.Client(timeout=httpx.Timeout(timeout_ms / 1000.0)) as client:
            response = client.request(
                method,
                url,
                content=body.encode("utf-8") if body else None,
                headers=headers,
            )
            return TransportResult(status_code=response.status_code, body=response.text)
    except httpx.TimeoutException as e:
        logger.debug("Request to %s timed out after %d ms", url, timeout_ms)
        return TransportResult(transport_error=f"timed out: {e}")
    except httpx.HTTPError as e:
        logger.debug("Request to %s failed: %s", url, e)
        return TransportResult(transport_error=str(e) or type(e).__name__)
    except (httpx.InvalidURL, UnicodeError, ValueError) as e:
        # Raised while building the request: malformed URL, non-ASCII header value
        logger.debug("Request to %s could not be built: %s", url, e)
        return TransportResult(transport_error=f"invalid request: {e}")
