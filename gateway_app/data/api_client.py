"""
REST client for the gateway backend.

Executes FetchRequest descriptors against the configured base URL and maps
every failure onto a small error taxonomy:

- TransportError: the backend could not be reached
- FetchTimeout: no response within the configured timeout
- HttpError: non-2xx response (status plus body detail)
- InvalidResponse: 2xx response whose body is not JSON

resolve_request() is the boundary used by the Dash fetch callbacks: it never
raises for backend failures and always returns a FetchOutcome.
"""

from typing import Any, Optional

import requests

from config import get_gateway_config
from core.logging_config import get_logger
from core.models import FetchOutcome, FetchRequest

logger = get_logger(__name__)


class GatewayError(Exception):
    """Base class for backend call failures."""

    kind = "error"


class TransportError(GatewayError):
    """The backend could not be reached."""

    kind = "transport"


class FetchTimeout(GatewayError):
    """The backend did not answer within the timeout."""

    kind = "timeout"


class HttpError(GatewayError):
    """The backend answered with a non-2xx status."""

    kind = "http"

    def __init__(self, status: int, detail: str):
        self.status = status
        self.detail = detail
        super().__init__(f"HTTP error! status: {status}. Details: {detail}")


class InvalidResponse(GatewayError):
    """A 2xx response whose body could not be decoded."""

    kind = "invalid_response"


def _error_detail(response: requests.Response) -> str:
    """Best available description of a failed response.

    Prefers the JSON ``error`` field the referral endpoint sends, then the
    raw body text, then the reason phrase.
    """
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    text = (response.text or "").strip()
    return text or response.reason or "no details"


class GatewayClient:
    """HTTP client bound to one backend base URL."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Backend root, e.g. http://localhost:5000
            timeout: Per-request timeout in seconds
            session: Optional pre-configured session (tests inject a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session

    @property
    def session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Accept": "application/json"})
        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def url_for(self, request: FetchRequest) -> str:
        return f"{self.base_url}{request.path}"

    def execute(self, request: FetchRequest) -> Any:
        """Issue ``request`` and return the decoded JSON payload.

        Raises:
            FetchTimeout: If the backend does not answer in time.
            TransportError: If the backend cannot be reached.
            HttpError: On a non-2xx status.
            InvalidResponse: If a 2xx body is not valid JSON.
        """
        url = self.url_for(request)
        logger.info("%s %s %s", request.method, url, request.query or "")

        try:
            response = self.session.request(
                request.method,
                url,
                params=request.query or None,
                json=request.body,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise FetchTimeout(f"Request timed out after {self.timeout:g}s.") from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"Could not reach the backend at {self.base_url} ({exc})"
            ) from exc

        if not response.ok:
            raise HttpError(response.status_code, _error_detail(response))

        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponse(f"Response from {url} is not valid JSON.") from exc


def resolve_request(client: GatewayClient, request: FetchRequest) -> FetchOutcome:
    """Execute ``request`` and wrap the result or the failure in a FetchOutcome."""
    try:
        payload = client.execute(request)
    except GatewayError as exc:
        logger.warning(
            "%s %s failed (%s): %s", request.flow, request.target, exc.kind, exc
        )
        return FetchOutcome.failure(request, exc.kind, str(exc))
    return FetchOutcome.success(request, payload)


# Module-level client (built from configuration on first access)
_client: Optional[GatewayClient] = None


def get_client() -> GatewayClient:
    """Get the shared client, built from the gateway configuration."""
    global _client
    if _client is None:
        api = get_gateway_config().api
        _client = GatewayClient(api.base_url, timeout=api.timeout_seconds)
    return _client


def reset_client() -> None:
    """Close and drop the shared client so the next call rebuilds it."""
    global _client
    if _client is not None:
        _client.close()
    _client = None
