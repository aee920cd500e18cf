"""RuleEvaluator application service: turns check rules into host reports."""

import time
from collections.abc import Callable

from loguru import logger

from ikesu.inspection.application.gap_detector import MetricGapDetector
from ikesu.inspection.domain.catalog import InspectionMetricCatalog
from ikesu.inspection.domain.exceptions import HostResolutionError, MackerelAPIError, MetricFetchError
from ikesu.inspection.domain.models import (
    CheckReport,
    CheckStatus,
    EvaluationResult,
    Host,
    HostSkip,
    Rule,
    SkipReason,
)
from ikesu.inspection.domain.protocols import HostDirectory
from ikesu.inspection.domain.provider import classify_provider
from ikesu.inspection.infrastructure.logging import LoggingContext

NO_DISRUPTION_MESSAGE = "No disruptions were detected in the metrics."


def report_name(rule: Rule) -> str:
    return f"IkesuChecker({rule.name})"


def disruption_message(rule: Rule, host_id: str, provider: str, metric_names: list[str]) -> str:
    return (
        f"Metrics of rule '{rule.name}' have been detected as disrupted for over {rule.interrupted_interval} "
        f"on host '{host_id}' with the provider '{provider}'. "
        f"The inspected metric(s) is/are [{', '.join(metric_names)}]. "
        "To verify the exact situation, please check the posting status of the host's metrics."
    )


class RuleEvaluator:
    """
    Sequential rule -> host -> metric inspection.

    Host resolution failures abort the whole evaluation. Failures while
    counting a single metric are logged and count as zero data points.
    """

    def __init__(
        self,
        host_directory: HostDirectory,
        catalog: InspectionMetricCatalog,
        gap_detector: MetricGapDetector,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize rule evaluator.

        Args:
            host_directory: Where the hosts of each rule are looked up
            catalog: Suggested inspection metric per provider
            gap_detector: Counts the data points of one metric
            clock: Source of the current epoch time
        """
        self.host_directory = host_directory
        self.catalog = catalog
        self.gap_detector = gap_detector
        self._clock = clock

    def evaluate(self, rules: list[Rule]) -> EvaluationResult:
        """
        Evaluate every rule in order.

        All reports of one evaluation share a single `checked_at` timestamp.

        Raises:
            HostResolutionError: if the hosts of any rule cannot be retrieved
        """
        result = EvaluationResult(checked_at=int(self._clock()))

        for rule in rules:
            with LoggingContext(rule=rule.name):
                logger.info(f"Evaluating rule '{rule.name}'")
                hosts = self._resolve_hosts(rule)
                logger.info(
                    f"Retrieved {len(hosts)} target hosts (service={rule.service}, roles={rule.roles})"
                )

                for host in hosts:
                    with LoggingContext(host=host.id):
                        outcome = self.inspect_host(rule, host, result.checked_at)
                    if isinstance(outcome, CheckReport):
                        result.reports.append(outcome)
                    else:
                        result.skipped.append(outcome)

        logger.info(
            f"Evaluated {len(rules)} rules: {len(result.reports)} reports, {len(result.skipped)} hosts skipped"
        )
        return result

    def _resolve_hosts(self, rule: Rule) -> list[Host]:
        try:
            return self.host_directory.find_hosts(rule.service, rule.roles)
        except MackerelAPIError as e:
            logger.error(f"Failed to retrieve the hosts: {e}")
            raise HostResolutionError(rule.name, str(e)) from e

    def inspect_host(self, rule: Rule, host: Host, checked_at: int) -> CheckReport | HostSkip:
        """Inspect one host, returning its report or the reason it was skipped."""
        provider = classify_provider(host)
        logger.info(f"Host {host.id} classified as provider '{provider}'")

        if not rule.allows(provider):
            logger.info(f"Skipping host {host.id}: provider '{provider}' is not a target of the rule")
            return HostSkip(rule.name, host.id, provider, SkipReason.PROVIDER_NOT_ALLOWED)

        metric_names = self.select_metrics(rule, provider)
        if not metric_names:
            logger.info(f"Skipping host {host.id}: no metrics to inspect for provider '{provider}'")
            return HostSkip(rule.name, host.id, provider, SkipReason.NO_INSPECTION_METRICS)

        total = sum(self._count(rule, host.id, metric_name) for metric_name in metric_names)

        if total == 0:
            status = CheckStatus.CRITICAL
            message = disruption_message(rule, host.id, provider, metric_names)
        else:
            status = CheckStatus.OK
            message = NO_DISRUPTION_MESSAGE

        logger.debug(f"Host {host.id}: {total} data points over {metric_names} -> {status.value}")
        return CheckReport(
            host_id=host.id,
            name=report_name(rule),
            status=status,
            message=message,
            occurred_at=checked_at,
        )

    def select_metrics(self, rule: Rule, provider: str) -> list[str]:
        """Catalog suggestion first, then the rule's own metrics in declared order."""
        metric_names = []
        if suggested := self.catalog.lookup(provider):
            metric_names.append(suggested)
        metric_names.extend(rule.metric_overrides(provider))
        return metric_names

    def _count(self, rule: Rule, host_id: str, metric_name: str) -> int:
        try:
            return self.gap_detector.count_data_points(
                host_id, metric_name, rule.interrupted_interval.seconds, int(self._clock())
            )
        except MetricFetchError as e:
            logger.error(f"{e.message}; it is counted as 0 and the inspection continues")
            return 0
