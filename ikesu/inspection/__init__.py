"""Metric disruption inspection package."""

from ikesu.inspection.application import (
    CheckUseCase,
    MetricGapDetector,
    ReportBatcher,
    RuleEvaluator,
    render_provider_listing,
)
from ikesu.inspection.domain import CheckConfig, CheckReport, CheckStatus, InspectionMetricCatalog, Rule
from ikesu.inspection.infrastructure import MackerelClient, load_check_config

__all__ = [
    "CheckUseCase",
    "MetricGapDetector",
    "ReportBatcher",
    "RuleEvaluator",
    "render_provider_listing",
    "CheckConfig",
    "CheckReport",
    "CheckStatus",
    "InspectionMetricCatalog",
    "Rule",
    "MackerelClient",
    "load_check_config",
]
