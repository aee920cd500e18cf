"""Submit check reports in API-sized batches."""

from collections.abc import Iterator, Sequence

from loguru import logger

from ikesu.inspection.domain.exceptions import MackerelAPIError, ReportSubmissionError
from ikesu.inspection.domain.models import CheckReport
from ikesu.inspection.domain.protocols import ReportSink

# The check report endpoint accepts at most 100 reports per request.
# https://mackerel.io/api-docs/entry/check-monitoring#post
MAX_REPORTS_PER_REQUEST = 100


def iter_batches(reports: Sequence[CheckReport], batch_size: int) -> Iterator[Sequence[CheckReport]]:
    for start in range(0, len(reports), batch_size):
        yield reports[start : start + batch_size]


class ReportBatcher:
    """Posts reports in order; stops at the first failing batch."""

    def __init__(self, sink: ReportSink, batch_size: int = MAX_REPORTS_PER_REQUEST):
        if not 1 <= batch_size <= MAX_REPORTS_PER_REQUEST:
            raise ValueError(f"batch_size must be between 1 and {MAX_REPORTS_PER_REQUEST}")
        self.sink = sink
        self.batch_size = batch_size

    def submit(self, reports: Sequence[CheckReport]) -> int:
        """
        Post all reports.

        Batches already posted are not rolled back when a later one fails.

        Returns:
            Number of reports posted

        Raises:
            ReportSubmissionError: on the first batch that cannot be posted
        """
        total = len(reports)
        if total == 0:
            logger.info("There were no results to report.")
            return 0

        logger.info(f"Starting to report {total} check monitoring results")
        posted = 0
        for batch in iter_batches(reports, self.batch_size):
            progress = f"{posted + len(batch)}/{total}"
            try:
                self.sink.post_check_reports(batch)
            except MackerelAPIError as e:
                logger.error(f"Failed to post the check monitoring reports ({progress}): {e}")
                raise ReportSubmissionError(progress, str(e)) from e
            posted += len(batch)
            logger.debug(f"Posted the check monitoring reports ({progress})")

        return posted
