"""Health probes for Grafana and Prometheus."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict

import httpx

from ..config import BackendTarget, Settings
from .client import PROBE_TIMEOUT

logger = logging.getLogger(__name__)


async def _probe(target: BackendTarget, path: str, include_details: bool = False) -> Dict[str, Any]:
    """GET a health endpoint; any failure is reported, never raised.

    Only HTTP 200 counts as healthy.
    """
    report: Dict[str, Any] = {"status": "unknown", "url": target.base_url}
    try:
        async with httpx.AsyncClient(timeout=PROBE_TIMEOUT) as client:
            response = await client.get(f"{target.base_url}{path}")
    except httpx.TimeoutException:
        report["status"] = "unhealthy"
        report["error"] = f"Health probe timed out after {PROBE_TIMEOUT:g}s"
        return report
    except Exception as e:
        report["status"] = "unhealthy"
        report["error"] = f"{type(e).__name__}: {e}"
        return report

    report["status"] = "healthy" if response.status_code == 200 else "unhealthy"
    if report["status"] == "unhealthy":
        report["error"] = f"HTTP {response.status_code}"
    if include_details:
        try:
            report["details"] = response.json()
        except ValueError:
            logger.debug(f"Health body from {target.base_url}{path} is not JSON")
    return report


async def health_check(args: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """Report Grafana and Prometheus health; a failing probe never fails the call."""
    grafana, prometheus = await asyncio.gather(
        _probe(settings.grafana, "/api/health", include_details=True),
        _probe(settings.prometheus, "/-/healthy"),
    )
    logger.info(f"Health: grafana={grafana['status']} prometheus={prometheus['status']}")
    return {
        "grafana": grafana,
        "prometheus": prometheus,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
