import math

import pytest
from conftest import NOW, FailingReportSink

from ikesu.inspection.application.report_batcher import ReportBatcher, iter_batches
from ikesu.inspection.domain.exceptions import ReportSubmissionError
from ikesu.inspection.domain.models import CheckReport, CheckStatus
from ikesu.inspection.infrastructure.report_sink import InMemoryReportSink


def _reports(n: int) -> list[CheckReport]:
    return [CheckReport(f"host-{i}", "IkesuChecker(r)", CheckStatus.OK, "", NOW) for i in range(n)]


@pytest.mark.parametrize("n", [1, 99, 100, 101, 250])
def test_batches_are_capped_and_ordered(n):
    sink = InMemoryReportSink()
    reports = _reports(n)

    posted = ReportBatcher(sink).submit(reports)

    assert posted == n
    assert len(sink.batches) == math.ceil(n / 100)
    assert all(len(batch) <= 100 for batch in sink.batches)
    assert sink.reports == reports


def test_empty_reports_is_a_no_op():
    sink = InMemoryReportSink()
    assert ReportBatcher(sink).submit([]) == 0
    assert sink.batches == []


def test_first_failure_stops_later_batches():
    sink = FailingReportSink(fail_on_call=2)

    with pytest.raises(ReportSubmissionError) as exc_info:
        ReportBatcher(sink).submit(_reports(350))

    # The first batch stands, the third and fourth are never attempted
    assert len(sink.batches) == 2
    assert len(sink.batches[0]) == 100
    assert exc_info.value.details["progress"] == "200/350"


def test_custom_batch_size():
    sink = InMemoryReportSink()
    ReportBatcher(sink, batch_size=10).submit(_reports(25))
    assert [len(batch) for batch in sink.batches] == [10, 10, 5]


@pytest.mark.parametrize("batch_size", [0, 101])
def test_batch_size_bounds(batch_size):
    with pytest.raises(ValueError):
        ReportBatcher(InMemoryReportSink(), batch_size=batch_size)


def test_iter_batches():
    assert [list(batch) for batch in iter_batches([1, 2, 3, 4, 5], 2)] == [[1, 2], [3, 4], [5]]
