"""Analysis utilities."""
from __future__ import annotations

from .report import write_report
from .plots import plot_metrics, plot_trace

__all__ = ["write_report", "plot_metrics", "plot_trace"]
