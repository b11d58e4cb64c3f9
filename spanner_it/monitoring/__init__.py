from .monitoring_client import (
    Aggregation,
    MonitoringClient,
    MonitoringError,
    Reducer,
    TimeInterval
)

__all__ = [
    'Aggregation',
    'MonitoringClient',
    'MonitoringError',
    'Reducer',
    'TimeInterval'
]
