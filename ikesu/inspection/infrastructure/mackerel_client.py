"""Minimal Mackerel API client covering the calls made by the inspection engine."""

from collections.abc import Sequence
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ikesu import __version__
from ikesu.inspection.domain.exceptions import MackerelAPIError, MetricNotFoundError
from ikesu.inspection.domain.models import CheckReport, Host, MetricValue
from ikesu.inspection.domain.protocols import HostDirectory, MetricsSource, ReportSink

DEFAULT_API_BASE = "https://api.mackerelio.com/"

ModelT = TypeVar("ModelT", bound=BaseModel)


def extract_error_message(response: httpx.Response) -> str:
    """Mackerel returns {"error": {"message": ...}} or {"error": "..."}."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.text.strip() or response.reason_phrase


class MackerelClient(HostDirectory, MetricsSource, ReportSink):
    """Synchronous Mackerel API client based on httpx."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Mackerel client.

        Args:
            api_key: Mackerel API key (needs write permission to post reports)
            base_url: API base URL
            timeout_seconds: Timeout of each request
            transport: Optional transport, mainly for tests
        """
        self.base_url = base_url or DEFAULT_API_BASE
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "X-Api-Key": api_key,
                "User-Agent": f"ikesu/{__version__}",
            },
            timeout=timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise MackerelAPIError(f"{method} {path} failed: {e}", original_error=e) from e

        if response.is_error:
            message = extract_error_message(response)
            logger.debug(f"{method} {path} returned {response.status_code}: {message}")
            if response.status_code == httpx.codes.NOT_FOUND and "metric not found" in message.lower():
                raise MetricNotFoundError(message, status_code=response.status_code)
            raise MackerelAPIError(
                f"API request failed ({response.status_code}): {message}", status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise MackerelAPIError(f"{method} {path} returned a non-JSON body", original_error=e) from e

    def _parse_items(self, body: Any, key: str, model: type[ModelT], path: str) -> list[ModelT]:
        if not isinstance(body, dict):
            raise MackerelAPIError(f"GET {path} returned an unexpected body: {body!r}")
        try:
            return [model.model_validate(item) for item in body.get(key) or []]
        except ValidationError as e:
            raise MackerelAPIError(
                f"GET {path} returned a malformed {model.__name__}: {e.error_count()} invalid field(s)",
                original_error=e,
            ) from e

    def find_hosts(self, service: str, roles: Sequence[str] | None = None) -> list[Host]:
        params: list[tuple[str, str]] = [("service", service)]
        params.extend(("role", role) for role in roles or [])
        path = "/api/v0/hosts"
        return self._parse_items(self._request("GET", path, params=params), "hosts", Host, path)

    def fetch_host_metric_values(self, host_id: str, metric_name: str, from_: int, to: int) -> list[MetricValue]:
        path = f"/api/v0/hosts/{host_id}/metrics"
        body = self._request("GET", path, params={"name": metric_name, "from": from_, "to": to})
        return self._parse_items(body, "metrics", MetricValue, path)

    def post_check_reports(self, reports: Sequence[CheckReport]) -> None:
        self._request(
            "POST",
            "/api/v0/monitoring/checks/report",
            json={"reports": [report.to_dict() for report in reports]},
        )
