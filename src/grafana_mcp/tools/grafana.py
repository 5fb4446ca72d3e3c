"""Grafana dashboard and alert tools."""

import logging
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..errors import BackendError
from .client import backend_request

logger = logging.getLogger(__name__)

DASHBOARD_TAGS = ["mcp-generated"]
REFRESH_INTERVALS = ["5s", "10s", "30s", "1m", "5m", "15m", "30m", "1h", "2h", "1d"]
SCHEMA_VERSION = 36

PANEL_WIDTH = 12
PANEL_HEIGHT = 8


def _default_field_config() -> Dict[str, Any]:
    return {
        "defaults": {
            "custom": {},
            "thresholds": {
                "mode": "absolute",
                "steps": [
                    {"color": "green", "value": None},
                    {"color": "red", "value": 80},
                ],
            },
        }
    }


def _default_options() -> Dict[str, Any]:
    return {
        "legend": {
            "calcs": [],
            "displayMode": "list",
            "placement": "bottom",
        }
    }


def build_panel(panel: Dict[str, Any], index: int) -> Dict[str, Any]:
    """Fill in id, layout, type and display defaults for one panel.

    Panels are laid out two per row, each 12 wide and 8 high. Keys
    the caller supplied win over defaults, except id which always
    follows the panel's position.
    """
    built = {
        "id": index + 1,
        "title": panel.get("title") or f"Panel {index + 1}",
        "type": panel.get("type") or "timeseries",
        "targets": panel.get("targets") or [],
        "gridPos": panel.get("gridPos") or {
            "h": PANEL_HEIGHT,
            "w": PANEL_WIDTH,
            "x": (index % 2) * PANEL_WIDTH,
            "y": (index // 2) * PANEL_HEIGHT,
        },
        "fieldConfig": panel.get("fieldConfig") or _default_field_config(),
        "options": panel.get("options") or _default_options(),
    }
    for key, value in panel.items():
        built.setdefault(key, value)
    return built


def build_dashboard(title: str, panels: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Dashboard create request for POST /api/dashboards/db."""
    return {
        "dashboard": {
            "id": None,
            "title": title,
            "panels": [build_panel(panel, index) for index, panel in enumerate(panels)],
            "tags": list(DASHBOARD_TAGS),
            "refresh": "30s",
            "time": {"from": "now-1h", "to": "now"},
            "timepicker": {"refresh_intervals": list(REFRESH_INTERVALS)},
            "schemaVersion": SCHEMA_VERSION,
        },
        "folderId": 0,
        "overwrite": False,
    }


def summarize_alerts(alerts: List[Dict[str, Any]], state: Optional[str] = None) -> Dict[str, Any]:
    """Count alerts in total and per state."""
    by_state: Dict[str, int] = {}
    for alert in alerts:
        alert_state = alert.get("state") or "unknown"
        by_state[alert_state] = by_state.get(alert_state, 0) + 1

    return {
        "total": len(alerts),
        "byState": by_state,
        "filtered": state or "all",
    }


async def get_dashboards(args: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """List Grafana dashboards, optionally filtered by a search term."""
    search = args.get("search") or ""
    logger.info(f"Fetching dashboards from Grafana (search={search!r})")

    try:
        result = await backend_request(
            settings.grafana,
            "Grafana",
            "/api/search",
            params={"query": search, "type": "dash-db"},
        )
    except BackendError as e:
        logger.error(f"Failed to get dashboards: {e}")
        raise type(e)(f"Failed to get dashboards: {e}") from e

    if not isinstance(result, list):
        raise BackendError("Failed to get dashboards: Grafana returned an unexpected body")
    dashboards = result
    logger.info(f"Retrieved {len(dashboards)} dashboards")
    return {
        "dashboards": dashboards,
        "total": len(dashboards),
        "search": search or "all",
    }


async def create_dashboard(args: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """Create a new dashboard; never overwrites an existing one."""
    title = args["title"]
    document = build_dashboard(title, args.get("panels") or [])
    logger.info(f"Creating dashboard in Grafana: {title}")

    try:
        result = await backend_request(
            settings.grafana,
            "Grafana",
            "/api/dashboards/db",
            method="POST",
            data=document,
        )
    except BackendError as e:
        logger.error(f"Failed to create dashboard '{title}': {e}")
        raise type(e)(f"Failed to create dashboard: {e}") from e

    result = result if isinstance(result, dict) else {}
    logger.info(f"Created dashboard '{title}' (id={result.get('id')}, url={result.get('url')})")
    return {
        "success": True,
        "dashboard": {
            "id": result.get("id"),
            "uid": result.get("uid"),
            "url": result.get("url"),
            "version": result.get("version"),
        },
        "message": f"Dashboard '{title}' created successfully",
    }


async def get_alerts(args: Dict[str, Any], settings: Settings) -> Dict[str, Any]:
    """Get Grafana alerts with a per-state summary."""
    state = args.get("state")
    logger.info(f"Fetching alerts from Grafana (state={state or 'all'})")

    try:
        result = await backend_request(
            settings.grafana,
            "Grafana",
            "/api/alerts",
            params={"state": state} if state else None,
        )
    except BackendError as e:
        logger.error(f"Failed to get alerts: {e}")
        raise type(e)(f"Failed to get alerts: {e}") from e

    if not isinstance(result, list):
        raise BackendError("Failed to get alerts: Grafana returned an unexpected body")
    alerts = result
    summary = summarize_alerts(alerts, state)
    logger.info(f"Retrieved {summary['total']} alerts: {summary['byState']}")
    return {"alerts": alerts, "summary": summary}
