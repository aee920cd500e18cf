"""Custom exceptions for the inspection engine."""


class IkesuError(Exception):
    """Base exception for all ikesu errors."""

    def __init__(self, message: str, details: dict | None = None):
        """
        Initialize ikesu exception.

        Args:
            message: Human-readable error message
            details: Optional dict with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(IkesuError):
    """Raised when the check configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = list(errors or [])
        details = {"errors": self.errors} if self.errors else None
        super().__init__(message, details)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ConfigurationError":
        """Build a single error that reports every collected validation failure."""
        return cls("\n".join(errors), errors)


class MackerelAPIError(IkesuError):
    """Raised when the Mackerel API returns an error or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None, original_error: Exception | None = None):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        if original_error:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__
        self.status_code = status_code
        super().__init__(message, details)


class MetricNotFoundError(MackerelAPIError):
    """Raised when the requested metric does not exist for the host."""

    pass


class HostResolutionError(IkesuError):
    """Raised when the hosts targeted by a rule cannot be retrieved."""

    def __init__(self, rule_name: str, reason: str):
        super().__init__(
            message=f"Failed to retrieve the hosts for rule '{rule_name}': {reason}",
            details={"rule_name": rule_name, "reason": reason},
        )


class MetricFetchError(IkesuError):
    """Raised when the data points of a metric cannot be counted."""

    def __init__(self, host_id: str, metric_name: str, reason: str):
        super().__init__(
            message=f"Failed to retrieve the metric '{metric_name}' for host '{host_id}': {reason}",
            details={"host_id": host_id, "metric_name": metric_name, "reason": reason},
        )


class ReportSubmissionError(IkesuError):
    """Raised when a batch of check reports cannot be posted."""

    def __init__(self, progress: str, reason: str):
        super().__init__(
            message=f"Failed to post the check monitoring reports ({progress}): {reason}",
            details={"progress": progress, "reason": reason},
        )
