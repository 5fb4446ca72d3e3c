"""Prometheus range queries."""

import logging
from typing import Any, Dict

from ..config import Settings
from ..errors import BackendError
from ..timeparse import resolve_time
from .client import backend_request

logger = logging.getLogger(__name__)

QUERY_STEP = "15s"


async def query_metrics(args: Dict[str, Any], settings: Settings) -> Any:
    """Execute a PromQL range query.

    Args:
        query: PromQL query string (e.g. "up", "rate(http_requests_total[5m])")
        start: Range start, "now", relative like "1h", or ISO 8601
        end: Range end, same formats as start

    Returns:
        The Prometheus response body unchanged
    """
    start = resolve_time(args["start"])
    end = resolve_time(args["end"])

    logger.info(f"Querying Prometheus: {args['query']} ({start} -> {end})")
    try:
        return await backend_request(
            settings.prometheus,
            "Prometheus",
            "/api/v1/query_range",
            params={
                "query": args["query"],
                "start": start,
                "end": end,
                "step": QUERY_STEP,
            },
        )
    except BackendError as e:
        logger.error(f"Failed to query metrics: {e}")
        raise type(e)(f"Failed to query metrics: {e}") from e
