"""Count the data points a host posted for a metric over a lookback window."""

import time
from collections.abc import Callable

from loguru import logger

from ikesu.inspection.domain.exceptions import MackerelAPIError, MetricFetchError, MetricNotFoundError
from ikesu.inspection.domain.protocols import MetricsSource

DEFAULT_MAX_FETCH_SPAN_SECONDS = 60 * 60 * 20  # 20h
DEFAULT_FETCH_DELAY_SECONDS = 0.2


class MetricGapDetector:
    """
    Walks a lookback window in fixed-size sub-windows.

    The metrics API rejects or truncates overly long single queries, so the
    interval is fetched `max_fetch_span_seconds` at a time with a short pause
    after each request.
    """

    def __init__(
        self,
        metrics_source: MetricsSource,
        max_fetch_span_seconds: int = DEFAULT_MAX_FETCH_SPAN_SECONDS,
        fetch_delay_seconds: float = DEFAULT_FETCH_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_fetch_span_seconds <= 0:
            raise ValueError("max_fetch_span_seconds must be positive")
        self.metrics_source = metrics_source
        self.max_fetch_span_seconds = int(max_fetch_span_seconds)
        self.fetch_delay_seconds = fetch_delay_seconds
        self._sleep = sleep

    def count_data_points(self, host_id: str, metric_name: str, interval_seconds: int, now: int) -> int:
        """
        Count the data points posted in [now - interval_seconds, now].

        Args:
            host_id: Host to inspect
            metric_name: Metric to inspect
            interval_seconds: Length of the lookback window
            now: End of the window (epoch seconds)

        Returns:
            Number of data points; 0 means the metric has gone silent

        Raises:
            MetricFetchError: if any sub-window fails for a reason other than
                the metric not existing
        """
        count = 0
        start = now - interval_seconds
        attempts = interval_seconds // self.max_fetch_span_seconds + 1

        for _ in range(attempts):
            end = min(start + self.max_fetch_span_seconds, now)
            try:
                values = self.metrics_source.fetch_host_metric_values(host_id, metric_name, start, end)
                count += len(values)
            except MetricNotFoundError:
                logger.info(
                    f"Metric not found: host={host_id} metric={metric_name} from={start} to={end}"
                )
            except MackerelAPIError as e:
                logger.error(
                    f"Fetching metric values failed: host={host_id} metric={metric_name} "
                    f"from={start} to={end}: {e}"
                )
                raise MetricFetchError(host_id, metric_name, str(e)) from e

            start = end
            self._sleep(self.fetch_delay_seconds)

        return count
