"""
Cloud Monitoring client for aggregated resource metrics.

Queries time series through ``google.cloud.monitoring_v3`` and reduces the
aligned points to a single value.
"""

import logging
import statistics
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from google.cloud import monitoring_v3
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class Reducer(str, Enum):
    """How aligned points are combined, across series and over time."""
    MEAN = "MEAN"
    MAX = "MAX"


class Aggregation(BaseModel):
    """Alignment period plus the reducer applied to the series."""
    model_config = ConfigDict(frozen=True)

    reducer: Reducer
    alignment_period_seconds: int = Field(default=60, gt=0)


class TimeInterval(BaseModel):
    """Closed time window of a metric query."""
    model_config = ConfigDict(frozen=True)

    start_time: datetime
    end_time: datetime

    @classmethod
    def until_now(cls, start_time: datetime) -> "TimeInterval":
        return cls(start_time=start_time, end_time=datetime.now(timezone.utc))


class MonitoringError(Exception):
    """Raised when a metric query fails."""
    pass


class MonitoringClient:
    """
    Thin wrapper over ``monitoring_v3.MetricServiceClient``.

    Args:
        metric_client: Pre-built MetricServiceClient; created lazily when omitted
    """

    _ALIGNERS = {
        Reducer.MEAN: monitoring_v3.Aggregation.Aligner.ALIGN_MEAN,
        Reducer.MAX: monitoring_v3.Aggregation.Aligner.ALIGN_MAX,
    }
    _REDUCERS = {
        Reducer.MEAN: monitoring_v3.Aggregation.Reducer.REDUCE_MEAN,
        Reducer.MAX: monitoring_v3.Aggregation.Reducer.REDUCE_MAX,
    }

    def __init__(self, metric_client: Optional[monitoring_v3.MetricServiceClient] = None):
        self._metric_client = metric_client

    @property
    def metric_client(self) -> monitoring_v3.MetricServiceClient:
        if self._metric_client is None:
            self._metric_client = monitoring_v3.MetricServiceClient()
        return self._metric_client

    @staticmethod
    def _timestamp(value: datetime) -> dict:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        seconds = value.timestamp()
        return {"seconds": int(seconds), "nanos": int((seconds - int(seconds)) * 10**9)}

    def _build_request(
        self,
        project_id: str,
        metric_filter: str,
        time_interval: TimeInterval,
        aggregation: Aggregation
    ) -> dict:
        return {
            "name": f"projects/{project_id}",
            "filter": metric_filter,
            "interval": monitoring_v3.TimeInterval({
                "start_time": self._timestamp(time_interval.start_time),
                "end_time": self._timestamp(time_interval.end_time),
            }),
            "aggregation": monitoring_v3.Aggregation({
                "alignment_period": {"seconds": aggregation.alignment_period_seconds},
                "per_series_aligner": self._ALIGNERS[aggregation.reducer],
                "cross_series_reducer": self._REDUCERS[aggregation.reducer],
            }),
            "view": monitoring_v3.ListTimeSeriesRequest.TimeSeriesView.FULL,
        }

    def list_points(
        self,
        project_id: str,
        metric_filter: str,
        time_interval: TimeInterval,
        aggregation: Aggregation
    ) -> List[float]:
        """Return every aligned point value matched by the query."""
        request = self._build_request(project_id, metric_filter, time_interval, aggregation)
        try:
            series = self.metric_client.list_time_series(request=request)
            return [point.value.double_value for ts in series for point in ts.points]
        except Exception as e:
            logger.error(f"Metric query failed for project {project_id}: {e}")
            raise MonitoringError(f"Failed to list time series: {e}") from e

    def get_aggregated_metric(
        self,
        project_id: str,
        metric_filter: str,
        time_interval: TimeInterval,
        aggregation: Aggregation
    ) -> Optional[float]:
        """
        Reduce a metric over a time window to one value.

        Returns:
            The mean or max of the aligned points, or None when there is no data
        """
        points = self.list_points(project_id, metric_filter, time_interval, aggregation)
        if not points:
            logger.info(f"No data points for filter: {metric_filter}")
            return None
        if aggregation.reducer is Reducer.MAX:
            return max(points)
        return statistics.mean(points)
