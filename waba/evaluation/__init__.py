"""
waba/evaluation/__init__.py
===========================
Acceptance metrics over solve results.
"""

from waba.evaluation.metrics import (
    AcceptanceReport,
    AssumptionMetrics,
    GlobalMetrics,
    compute_metrics,
    cost_scalar,
    jaccard_distance,
    metrics_for,
)

__all__ = [
    "AcceptanceReport",
    "AssumptionMetrics",
    "GlobalMetrics",
    "compute_metrics",
    "cost_scalar",
    "jaccard_distance",
    "metrics_for",
]
