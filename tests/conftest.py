"""
Centralized test configuration and fixtures for Spanner IT resources.

This module provides shared test fixtures that:
1. Configure logging for test runs
2. Provide an in-memory Spanner client and a ready-made manager builder
3. Keep retries instant so provisioning tests never sleep
"""

import logging
import os
import sys
from pathlib import Path
from typing import List
from unittest.mock import Mock

import pytest

_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from spanner_it.database.types import Dialect, Mutation
from spanner_it.monitoring.monitoring_client import MonitoringClient
from spanner_it.testing import (
    FakeSpannerClient,
    RetryPolicy,
    SpannerResourceManager,
    SpannerResourceManagerBuilder
)

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TEST_ID = "test"
PROJECT_ID = "test-project"
REGION = "us-east1"
DIALECT = Dialect.GOOGLE_STANDARD_SQL

SINGERS_DDL = (
    "CREATE TABLE Singers (\n"
    "  SingerId   INT64 NOT NULL,\n"
    "  FirstName  STRING(1024),\n"
    "  LastName   STRING(1024),\n"
    ") PRIMARY KEY (SingerId)"
)

RESOURCE_EXHAUSTED_MESSAGE = (
    "com.google.cloud.spanner.SpannerException: RESOURCE_EXHAUSTED: "
    "io.grpc.StatusRuntimeException: RESOURCE_EXHAUSTED: CPU overload detected"
)


@pytest.fixture(autouse=True)
def isolated_spanner_env(monkeypatch):
    """Keep builder defaults independent of the developer's SPANNER_* settings."""
    for name in list(os.environ):
        if name.startswith('SPANNER_') or name in ('GOOGLE_CLOUD_PROJECT', 'ENV'):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sleeps() -> List[float]:
    """Delays requested by the retry policy, recorded instead of slept."""
    return []


@pytest.fixture
def retry_policy(sleeps) -> RetryPolicy:
    return RetryPolicy(max_retries=1, backoff_base=10.0, backoff_max=60.0, sleep=sleeps.append)


@pytest.fixture
def spanner_client() -> FakeSpannerClient:
    return FakeSpannerClient()


@pytest.fixture
def builder(retry_policy) -> SpannerResourceManagerBuilder:
    return SpannerResourceManager.builder(TEST_ID, PROJECT_ID, REGION, DIALECT).set_retry_policy(
        retry_policy
    )


@pytest.fixture
def manager(builder, spanner_client) -> SpannerResourceManager:
    return SpannerResourceManager(builder, spanner_client)


@pytest.fixture
def ready_manager(manager) -> SpannerResourceManager:
    """Manager whose instance, database and Singers table already exist."""
    manager.execute_ddl_statement(SINGERS_DDL)
    return manager


@pytest.fixture
def monitoring_client():
    client = Mock(spec=MonitoringClient)
    client.get_aggregated_metric.return_value = 1.1
    return client


@pytest.fixture
def singer_mutations() -> List[Mutation]:
    return [
        Mutation.insert_or_update(
            "Singers", {"SingerId": 1, "FirstName": "Marc", "LastName": "Richards"}
        ),
        Mutation.insert_or_update(
            "Singers", {"SingerId": 2, "FirstName": "Catalina", "LastName": "Smith"}
        ),
    ]
