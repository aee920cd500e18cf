"""Infrastructure layer for the inspection engine."""

from ikesu.inspection.infrastructure.logging import LoggingContext, configure_logging
from ikesu.inspection.infrastructure.mackerel_client import MackerelClient
from ikesu.inspection.infrastructure.report_sink import (
    DryRunReportPrinter,
    InMemoryReportSink,
    reports_to_dataframe,
)
from ikesu.inspection.infrastructure.rule_loader import (
    DictRuleLoader,
    FileRuleLoader,
    HttpRuleLoader,
    load_check_config,
    parse_check_config,
)

__all__ = [
    "LoggingContext",
    "configure_logging",
    "MackerelClient",
    "DryRunReportPrinter",
    "InMemoryReportSink",
    "reports_to_dataframe",
    "DictRuleLoader",
    "FileRuleLoader",
    "HttpRuleLoader",
    "load_check_config",
    "parse_check_config",
]
