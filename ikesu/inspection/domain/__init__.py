"""Domain layer for the inspection engine."""

from ikesu.inspection.domain.catalog import InspectionMetricCatalog
from ikesu.inspection.domain.exceptions import (
    ConfigurationError,
    HostResolutionError,
    IkesuError,
    MackerelAPIError,
    MetricFetchError,
    MetricNotFoundError,
    ReportSubmissionError,
)
from ikesu.inspection.domain.interval import InterruptedInterval
from ikesu.inspection.domain.models import (
    CheckConfig,
    CheckReport,
    CheckStatus,
    EvaluationResult,
    Host,
    HostSkip,
    MetricValue,
    Rule,
    SkipReason,
)
from ikesu.inspection.domain.protocols import HostDirectory, MetricsSource, ReportSink, RuleLoader
from ikesu.inspection.domain.provider import classify_provider

__all__ = [
    "InspectionMetricCatalog",
    "ConfigurationError",
    "HostResolutionError",
    "IkesuError",
    "MackerelAPIError",
    "MetricFetchError",
    "MetricNotFoundError",
    "ReportSubmissionError",
    "InterruptedInterval",
    "CheckConfig",
    "CheckReport",
    "CheckStatus",
    "EvaluationResult",
    "Host",
    "HostSkip",
    "MetricValue",
    "Rule",
    "SkipReason",
    "HostDirectory",
    "MetricsSource",
    "ReportSink",
    "RuleLoader",
    "classify_provider",
]
