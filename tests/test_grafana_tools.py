"""Tests for the Grafana dashboard and alert adapters."""

import asyncio
import json

import httpx
import pytest

from grafana_mcp.errors import BackendError, BackendTimeoutError
from grafana_mcp.tools import grafana


def test_panels_get_ids_grid_and_type():
    document = grafana.build_dashboard("Ops", [{}, {}, {}])
    panels = document["dashboard"]["panels"]

    assert [p["id"] for p in panels] == [1, 2, 3]
    assert [(p["gridPos"]["x"], p["gridPos"]["y"]) for p in panels] == [(0, 0), (12, 0), (0, 8)]
    assert all(p["gridPos"]["w"] == 12 and p["gridPos"]["h"] == 8 for p in panels)
    assert all(p["type"] == "timeseries" for p in panels)
    assert [p["title"] for p in panels] == ["Panel 1", "Panel 2", "Panel 3"]


def test_panel_defaults_for_thresholds_and_legend():
    panel = grafana.build_panel({}, 0)
    steps = panel["fieldConfig"]["defaults"]["thresholds"]["steps"]
    assert steps == [{"color": "green", "value": None}, {"color": "red", "value": 80}]
    assert panel["options"]["legend"]["displayMode"] == "list"
    assert panel["options"]["legend"]["placement"] == "bottom"


def test_panel_overrides_are_kept():
    grid = {"h": 4, "w": 24, "x": 0, "y": 0}
    panel = grafana.build_panel(
        {"id": 99, "type": "stat", "gridPos": grid, "datasource": {"uid": "prom"}}, 2
    )
    assert panel["id"] == 3
    assert panel["type"] == "stat"
    assert panel["gridPos"] == grid
    assert panel["datasource"] == {"uid": "prom"}


def test_dashboard_document_settings():
    document = grafana.build_dashboard("Ops", [])
    dashboard = document["dashboard"]
    assert dashboard["tags"] == ["mcp-generated"]
    assert dashboard["refresh"] == "30s"
    assert dashboard["time"] == {"from": "now-1h", "to": "now"}
    assert document["folderId"] == 0
    assert document["overwrite"] is False


def test_alert_summary_counts_by_state():
    summary = grafana.summarize_alerts([{"state": "ok"}, {"state": "ok"}, {"state": "alerting"}])
    assert summary["total"] == 3
    assert summary["byState"] == {"ok": 2, "alerting": 1}
    assert summary["filtered"] == "all"


def test_get_dashboards_request_and_payload(settings, mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json=[{"uid": "a", "title": "A"}]))

    result = asyncio.run(grafana.get_dashboards({"search": "cpu"}, settings))

    assert result == {"dashboards": [{"uid": "a", "title": "A"}], "total": 1, "search": "cpu"}
    request = requests[0]
    assert request.url.path == "/api/search"
    assert request.url.params["query"] == "cpu"
    assert request.url.params["type"] == "dash-db"
    assert request.headers["Authorization"] == "Bearer test-token"


def test_get_dashboards_empty_search_is_unfiltered(settings, mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json=[]))

    result = asyncio.run(grafana.get_dashboards({"search": ""}, settings))

    assert result["search"] == "all"
    assert requests[0].url.params["query"] == ""


def test_create_dashboard_posts_document(settings, mock_http):
    requests = mock_http(lambda request: httpx.Response(
        200, json={"id": 7, "uid": "abc", "url": "/d/abc/ops", "version": 1, "status": "success"}
    ))

    result = asyncio.run(grafana.create_dashboard({"title": "Ops", "panels": [{}]}, settings))

    assert result["success"] is True
    assert result["dashboard"] == {"id": 7, "uid": "abc", "url": "/d/abc/ops", "version": 1}
    request = requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/dashboards/db"
    assert request.headers["Authorization"] == "Bearer test-token"
    body = json.loads(request.content)
    assert body["dashboard"]["title"] == "Ops"
    assert body["dashboard"]["panels"][0]["id"] == 1
    assert body["overwrite"] is False


def test_get_alerts_with_state_filter(settings, mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json=[{"state": "alerting"}]))

    result = asyncio.run(grafana.get_alerts({"state": "alerting"}, settings))

    assert requests[0].url.params["state"] == "alerting"
    assert result["summary"] == {"total": 1, "byState": {"alerting": 1}, "filtered": "alerting"}


def test_get_alerts_without_state_omits_param(settings, mock_http):
    requests = mock_http(lambda request: httpx.Response(
        200, json=[{"state": "ok"}, {"state": "ok"}, {"state": "alerting"}]
    ))

    result = asyncio.run(grafana.get_alerts({"state": None}, settings))

    assert "state" not in requests[0].url.params
    assert result["summary"]["byState"] == {"ok": 2, "alerting": 1}
    assert len(result["alerts"]) == 3


def test_backend_status_error(settings, mock_http):
    mock_http(lambda request: httpx.Response(502))

    with pytest.raises(BackendError, match="Failed to get alerts: Grafana returned status 502"):
        asyncio.run(grafana.get_alerts({"state": None}, settings))


def test_backend_timeout(settings, mock_http):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    mock_http(handler)

    with pytest.raises(BackendTimeoutError, match="timed out"):
        asyncio.run(grafana.get_dashboards({"search": ""}, settings))


def test_backend_connection_error(settings, mock_http):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock_http(handler)

    with pytest.raises(BackendError, match="ConnectError"):
        asyncio.run(grafana.create_dashboard({"title": "Ops", "panels": []}, settings))


def test_supplied_field_config_and_options_survive():
    field_config = {"defaults": {"unit": "percent"}}
    options = {"legend": {"displayMode": "table"}}
    panel = grafana.build_panel({"fieldConfig": field_config, "options": options}, 0)
    assert panel["fieldConfig"] == field_config
    assert panel["options"] == options


@pytest.mark.parametrize("tool", [grafana.get_dashboards, grafana.get_alerts])
def test_non_list_body_is_backend_error(tool, settings, mock_http):
    mock_http(lambda request: httpx.Response(200, json={"message": "not a list"}))

    with pytest.raises(BackendError, match="unexpected body"):
        asyncio.run(tool({"search": "", "state": None}, settings))
