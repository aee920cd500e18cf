"""Report sinks and dry-run output for check reports."""

import sys
from collections.abc import Sequence
from typing import TextIO

import pandas as pd

from ikesu.inspection.domain.models import CheckReport
from ikesu.inspection.domain.protocols import ReportSink

DRY_RUN_BANNER = (
    "--- The report will be displayed and then the process will end, because DryRun mode is specified."
)


def reports_to_dataframe(reports: Sequence[CheckReport]) -> pd.DataFrame:
    """Tabulate reports, one row per host and rule."""
    if not reports:
        return pd.DataFrame(columns=["host_id", "name", "status", "occurred_at", "message"])

    return pd.DataFrame(
        [
            {
                "host_id": report.host_id,
                "name": report.name,
                "status": report.status.value,
                "occurred_at": report.occurred_at,
                "message": report.message,
            }
            for report in reports
        ]
    )


class InMemoryReportSink(ReportSink):
    """Keeps posted batches in memory."""

    def __init__(self):
        self.batches: list[list[CheckReport]] = []

    def post_check_reports(self, reports: Sequence[CheckReport]) -> None:
        self.batches.append(list(reports))

    @property
    def reports(self) -> list[CheckReport]:
        return [report for batch in self.batches for report in batch]

    def to_dataframe(self) -> pd.DataFrame:
        return reports_to_dataframe(self.reports)

    def clear(self):
        self.batches.clear()

    def __len__(self):
        return len(self.reports)


class DryRunReportPrinter:
    """Prints reports instead of posting them."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    def print_reports(self, reports: Sequence[CheckReport]) -> None:
        stream = self.stream or sys.stdout
        print(DRY_RUN_BANNER, file=stream)
        if not reports:
            print("(no reports)", file=stream)
            return

        with pd.option_context("display.max_colwidth", None):
            print(reports_to_dataframe(reports).to_string(index=False), file=stream)
