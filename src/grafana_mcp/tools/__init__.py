"""Backend adapters package."""

from . import grafana
from . import health
from . import metrics

__all__ = ["grafana", "health", "metrics"]
