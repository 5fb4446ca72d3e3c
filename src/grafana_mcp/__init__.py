"""Grafana MCP - Prometheus and Grafana tools behind an MCP server.

Exposes:
- query_metrics (Prometheus range queries)
- get_dashboards / create_dashboard (Grafana dashboards)
- get_alerts (Grafana alerts)
- health_check (both backends)
"""

__version__ = "1.0.0"
