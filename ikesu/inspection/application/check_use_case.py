"""One check run: validate rules, inspect hosts, deliver reports."""

from loguru import logger

from ikesu.inspection.application.report_batcher import ReportBatcher
from ikesu.inspection.application.rule_evaluator import RuleEvaluator
from ikesu.inspection.domain.catalog import InspectionMetricCatalog
from ikesu.inspection.domain.models import CheckConfig, EvaluationResult
from ikesu.inspection.infrastructure.report_sink import DryRunReportPrinter


class CheckUseCase:
    """
    Use case for detecting disrupted metrics and reporting them to Mackerel.

    In dry-run mode the reports are printed and nothing is posted.
    """

    def __init__(
        self,
        catalog: InspectionMetricCatalog,
        rule_evaluator: RuleEvaluator,
        report_batcher: ReportBatcher,
        printer: DryRunReportPrinter | None = None,
        dry_run: bool = False,
    ):
        self.catalog = catalog
        self.rule_evaluator = rule_evaluator
        self.report_batcher = report_batcher
        self.printer = printer or DryRunReportPrinter()
        self.dry_run = dry_run

    def run(self, config: CheckConfig) -> EvaluationResult:
        """
        Execute a check run.

        Rules are validated before any request is made.

        Raises:
            ConfigurationError: if the rules are invalid
            HostResolutionError: if the hosts of a rule cannot be retrieved
            ReportSubmissionError: if a batch of reports cannot be posted
        """
        config.validate_rules(self.catalog)

        result = self.rule_evaluator.evaluate(config.rules)

        if self.dry_run:
            self.printer.print_reports(result.reports)
            return result

        self.report_batcher.submit(result.reports)
        logger.info(f"✓ Check run completed with {len(result.reports)} reports")
        return result
