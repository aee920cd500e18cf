import pytest
from conftest import NOW, FakeHostDirectory, FakeMetricsSource, make_host

from ikesu.inspection.application.gap_detector import MetricGapDetector
from ikesu.inspection.application.rule_evaluator import NO_DISRUPTION_MESSAGE, RuleEvaluator, report_name
from ikesu.inspection.domain.exceptions import HostResolutionError, MackerelAPIError
from ikesu.inspection.domain.models import CheckStatus, HostSkip, Rule, SkipReason

EC2_METRIC = "custom.ec2.status_check_failed.instance"


@pytest.fixture()
def hoge_rule():
    return Rule(
        name="hoge",
        service="hoge_service",
        providers=["ec2", "rds"],
        inspection_metrics={"ec2": ["custom.foo.bar"]},
    )


def test_silent_host_is_critical(evaluator, host_directory, metrics_source, hoge_rule):
    host_directory.hosts["hoge_service"] = [make_host("ec2-host", provider="ec2")]

    result = evaluator.evaluate([hoge_rule])

    assert len(result.reports) == 1
    report = result.reports[0]
    assert report.status == CheckStatus.CRITICAL
    assert report.host_id == "ec2-host"
    assert report.name == "IkesuChecker(hoge)"
    assert report.occurred_at == NOW
    assert "hoge" in report.message
    assert "24h" in report.message
    assert "'ec2'" in report.message
    assert f"[{EC2_METRIC}, custom.foo.bar]" in report.message

    inspected = {(call[0], call[1]) for call in metrics_source.calls}
    assert inspected == {("ec2-host", EC2_METRIC), ("ec2-host", "custom.foo.bar")}


@pytest.mark.parametrize("metric", [EC2_METRIC, "custom.foo.bar"])
def test_any_data_point_is_ok(evaluator, host_directory, metrics_source, hoge_rule, metric):
    host_directory.hosts["hoge_service"] = [make_host("ec2-host", provider="ec2")]
    metrics_source.points[("ec2-host", metric)] = 1

    result = evaluator.evaluate([hoge_rule])

    assert [report.status for report in result.reports] == [CheckStatus.OK]
    assert result.reports[0].message == NO_DISRUPTION_MESSAGE


def test_provider_outside_allow_list_is_skipped(evaluator, host_directory, metrics_source):
    rule = Rule(name="foo", service="foo_service", providers=["lambda"])
    host_directory.hosts["foo_service"] = [make_host("ec2-host", provider="ec2")]

    result = evaluator.evaluate([rule])

    assert result.reports == []
    assert result.skipped == [HostSkip("foo", "ec2-host", "ec2", SkipReason.PROVIDER_NOT_ALLOWED)]
    assert metrics_source.calls == []


def test_host_without_metrics_is_skipped(evaluator, host_directory, metrics_source):
    rule = Rule(name="foo", service="foo_service")
    host_directory.hosts["foo_service"] = [
        make_host("agent-host", agent="mackerel-agent"),
        make_host("sqs-queue", provider="sqs"),
    ]

    result = evaluator.evaluate([rule])

    assert result.reports == []
    assert [skip.reason for skip in result.skipped] == [SkipReason.NO_INSPECTION_METRICS] * 2
    assert metrics_source.calls == []


def test_rule_metrics_make_unsuggested_provider_inspectable(evaluator, host_directory):
    rule = Rule(name="agents", service="svc", inspection_metrics={"agent": ["loadavg5"]})
    host_directory.hosts["svc"] = [make_host("agent-host", agent="mackerel-agent")]

    result = evaluator.evaluate([rule])

    assert [report.status for report in result.reports] == [CheckStatus.CRITICAL]
    assert "[loadavg5]" in result.reports[0].message


def test_select_metrics_order(evaluator):
    rule = Rule(name="r", service="s", inspection_metrics={"ec2": ["b", "a"]})
    assert evaluator.select_metrics(rule, "ec2") == [EC2_METRIC, "b", "a"]
    assert evaluator.select_metrics(rule, "EC2") == [EC2_METRIC, "b", "a"]
    assert evaluator.select_metrics(rule, "rds") == ["custom.rds.cpu.used"]
    assert evaluator.select_metrics(rule, "") == []


def test_metric_failure_counts_as_zero_and_continues(catalog):
    source = FakeMetricsSource(
        points={("h", "custom.foo.bar"): 3},
        errors={("h", EC2_METRIC): MackerelAPIError("API request failed (503): unavailable", 503)},
    )
    directory = FakeHostDirectory({"svc": [make_host("h", provider="ec2")]})
    evaluator = RuleEvaluator(
        directory, catalog, MetricGapDetector(source, fetch_delay_seconds=0, sleep=lambda _: None), clock=lambda: NOW
    )
    rule = Rule(name="r", service="svc", inspection_metrics={"ec2": ["custom.foo.bar"]})

    result = evaluator.evaluate([rule])

    assert [report.status for report in result.reports] == [CheckStatus.OK]


def test_metric_failures_on_every_metric_are_critical(catalog):
    source = FakeMetricsSource(errors={("h", EC2_METRIC): MackerelAPIError("boom", 500)})
    directory = FakeHostDirectory({"svc": [make_host("h", provider="ec2")]})
    evaluator = RuleEvaluator(
        directory, catalog, MetricGapDetector(source, fetch_delay_seconds=0, sleep=lambda _: None), clock=lambda: NOW
    )

    result = evaluator.evaluate([Rule(name="r", service="svc")])

    assert [report.status for report in result.reports] == [CheckStatus.CRITICAL]


def test_host_resolution_failure_aborts(evaluator, host_directory, hoge_rule):
    host_directory.error = MackerelAPIError("API request failed (401): Authentication failed", 401)

    with pytest.raises(HostResolutionError) as exc_info:
        evaluator.evaluate([hoge_rule, Rule(name="other", service="other_service")])

    assert exc_info.value.details["rule_name"] == "hoge"
    assert len(host_directory.calls) == 1


def test_roles_are_passed_to_host_lookup(evaluator, host_directory):
    evaluator.evaluate(
        [
            Rule(name="foo", service="foo_service", roles=["role1", "role2"]),
            Rule(name="bar", service="bar_service"),
        ]
    )
    assert host_directory.calls == [("foo_service", ["role1", "role2"]), ("bar_service", None)]


def test_reports_share_checked_at(catalog, host_directory, metrics_source):
    ticks = iter(range(NOW, NOW + 100))
    evaluator = RuleEvaluator(
        host_directory,
        catalog,
        MetricGapDetector(metrics_source, fetch_delay_seconds=0, sleep=lambda _: None),
        clock=lambda: next(ticks),
    )
    host_directory.hosts["svc"] = [make_host(f"h{i}", provider="rds") for i in range(3)]

    result = evaluator.evaluate([Rule(name="a", service="svc"), Rule(name="b", service="svc")])

    assert len(result.reports) == 6
    assert {report.occurred_at for report in result.reports} == {NOW}
    assert result.checked_at == NOW


@pytest.mark.parametrize("points", [0, 1, 5])
def test_status_is_critical_iff_no_data_points(evaluator, host_directory, metrics_source, points):
    host_directory.hosts["svc"] = [make_host("h", provider="lambda")]
    metrics_source.points[("h", "custom.lambda.count.invocations")] = points

    result = evaluator.evaluate([Rule(name="r", service="svc", interrupted_interval="1h")])

    expected = CheckStatus.CRITICAL if points == 0 else CheckStatus.OK
    assert [report.status for report in result.reports] == [expected]


@pytest.mark.parametrize(
    ("name", "expected"),
    [("hoge", "IkesuChecker(hoge)"), ("web app", "IkesuChecker(web app)")],
)
def test_report_name_is_stable_across_runs(name, expected):
    assert report_name(Rule(name=name, service="s")) == expected
