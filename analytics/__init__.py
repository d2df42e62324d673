"""Analytics: rule-based predictions and dashboard aggregates."""

from analytics.predictive import (
    dashboard_summary,
    filter_incidents,
    filter_resources,
    generate_predictions,
    resource_stats,
    risk_factors,
)

__all__ = [
    "dashboard_summary",
    "filter_incidents",
    "filter_resources",
    "generate_predictions",
    "resource_stats",
    "risk_factors",
]
