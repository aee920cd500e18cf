"""Protocols (interfaces) for the collaborators of the inspection engine."""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ikesu.inspection.domain.models import CheckReport, Host, MetricValue


@runtime_checkable
class HostDirectory(Protocol):
    """Interface for resolving the hosts targeted by a rule."""

    def find_hosts(self, service: str, roles: Sequence[str] | None = None) -> list[Host]:
        """
        Find hosts belonging to a service.

        Args:
            service: Service name
            roles: Optional role names inside the service

        Returns:
            Matching hosts
        """
        ...


@runtime_checkable
class MetricsSource(Protocol):
    """Interface for reading raw metric data points of a host."""

    def fetch_host_metric_values(self, host_id: str, metric_name: str, from_: int, to: int) -> list[MetricValue]:
        """
        Fetch data points posted between two epoch seconds.

        Raises:
            MetricNotFoundError: when the metric does not exist for the host
        """
        ...


@runtime_checkable
class ReportSink(Protocol):
    """Interface for delivering check reports."""

    def post_check_reports(self, reports: Sequence[CheckReport]) -> None:
        """Post one batch of check reports."""
        ...


@runtime_checkable
class RuleLoader(Protocol):
    """Interface for reading the raw check configuration from one backing store."""

    def load(self, location: str) -> bytes:
        """
        Read the configuration document.

        Args:
            location: Path or URI of the document

        Returns:
            Raw document bytes
        """
        ...
