"""
Spanner IT Testing Infrastructure

Resource managers, ID generation, retry policy and test doubles for ephemeral
Cloud Spanner databases used in integration tests.
"""

from .exceptions import ResourceStateError, SpannerResourceManagerError
from .fake_spanner_client import FakeSpannerClient
from .manager_config import SpannerResourceManagerBuilder, SpannerResourceManagerConfig
from .resource_ids import generate_database_id, generate_instance_id
from .retry_policy import RetryPolicy
from .spanner_resource_manager import (
    AVERAGE_CPU_METRIC,
    MAX_CPU_METRIC,
    ResourceState,
    SpannerResourceManager
)

__all__ = [
    'AVERAGE_CPU_METRIC',
    'MAX_CPU_METRIC',
    'FakeSpannerClient',
    'ResourceState',
    'ResourceStateError',
    'RetryPolicy',
    'SpannerResourceManager',
    'SpannerResourceManagerBuilder',
    'SpannerResourceManagerConfig',
    'SpannerResourceManagerError',
    'generate_database_id',
    'generate_instance_id'
]
