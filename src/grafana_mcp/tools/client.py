"""Single-shot backend calls with httpx failures mapped onto BackendError."""

from typing import Any, Optional

import httpx

from ..config import BackendTarget
from ..errors import BackendError, BackendTimeoutError

DEFAULT_TIMEOUT = 30.0
PROBE_TIMEOUT = 5.0


async def backend_request(
    target: BackendTarget,
    backend: str,
    path: str,
    method: str = "GET",
    params: Optional[dict] = None,
    data: Optional[dict] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Any:
    """Make one request against a backend and return its JSON body.

    Args:
        target: Backend base URL and token
        backend: Display name used in error messages (e.g. "Grafana")
        path: Path appended to the base URL, starting with "/"
        method: "GET" or "POST"
        params: Query string parameters
        data: JSON body for POST
        timeout: Seconds before the call fails with BackendTimeoutError

    Raises:
        BackendTimeoutError: no answer within timeout
        BackendError: non-2xx status, transport failure or unreadable body
    """
    if method not in ("GET", "POST"):
        raise ValueError(f"Unsupported method: {method}")

    url = f"{target.base_url}{path}"
    async with httpx.AsyncClient(timeout=timeout) as client:
        try:
            response = await client.request(
                method, url, params=params, json=data, headers=target.headers()
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise BackendTimeoutError(f"{backend} request timed out after {timeout:g}s") from e
        except httpx.HTTPStatusError as e:
            raise BackendError(f"{backend} returned status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise BackendError(f"{type(e).__name__}: {e}") from e

    if not response.text:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise BackendError(f"{backend} returned a non-JSON body") from e
