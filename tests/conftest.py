from collections.abc import Sequence

import pytest

from ikesu.inspection.application.gap_detector import MetricGapDetector
from ikesu.inspection.application.rule_evaluator import RuleEvaluator
from ikesu.inspection.domain.catalog import InspectionMetricCatalog
from ikesu.inspection.domain.exceptions import MackerelAPIError, MetricNotFoundError
from ikesu.inspection.domain.models import Host, MetricValue

NOW = 1_700_000_000


def make_host(host_id: str = "host-1", provider: str = "", agent: str = "") -> Host:
    meta = {"agent-name": agent}
    if provider:
        meta["cloud"] = {"provider": provider}
    return Host.model_validate({"id": host_id, "name": host_id, "meta": meta})


class FakeHostDirectory:
    def __init__(self, hosts: dict[str, list[Host]] | None = None, error: Exception | None = None):
        self.hosts = hosts or {}
        self.error = error
        self.calls: list[tuple[str, list[str] | None]] = []

    def find_hosts(self, service: str, roles: Sequence[str] | None = None) -> list[Host]:
        self.calls.append((service, list(roles) if roles is not None else None))
        if self.error:
            raise self.error
        return self.hosts.get(service, [])


class FakeMetricsSource:
    """Returns `points[(host, metric)]` data points for every window."""

    def __init__(
        self,
        points: dict[tuple[str, str], int] | None = None,
        not_found: set[tuple[str, str]] | None = None,
        errors: dict[tuple[str, str], Exception] | None = None,
    ):
        self.points = points or {}
        self.not_found = not_found or set()
        self.errors = errors or {}
        self.calls: list[tuple[str, str, int, int]] = []

    def fetch_host_metric_values(self, host_id: str, metric_name: str, from_: int, to: int) -> list[MetricValue]:
        self.calls.append((host_id, metric_name, from_, to))
        key = (host_id, metric_name)
        if key in self.errors:
            raise self.errors[key]
        if key in self.not_found:
            raise MetricNotFoundError("metric not found", status_code=404)
        return [MetricValue(time=from_ + i, value=1.0) for i in range(self.points.get(key, 0))]


class FailingReportSink:
    """Fails on the n-th call (1-based)."""

    def __init__(self, fail_on_call: int):
        self.fail_on_call = fail_on_call
        self.batches = []

    def post_check_reports(self, reports):
        if len(self.batches) + 1 == self.fail_on_call:
            self.batches.append(None)
            raise MackerelAPIError("API request failed (500): internal error", status_code=500)
        self.batches.append(list(reports))


@pytest.fixture()
def catalog():
    return InspectionMetricCatalog()


@pytest.fixture()
def metrics_source():
    return FakeMetricsSource()


@pytest.fixture()
def host_directory():
    return FakeHostDirectory()


@pytest.fixture()
def gap_detector(metrics_source):
    return MetricGapDetector(metrics_source, fetch_delay_seconds=0, sleep=lambda _: None)


@pytest.fixture()
def evaluator(host_directory, catalog, gap_detector):
    return RuleEvaluator(host_directory, catalog, gap_detector, clock=lambda: NOW)
