"""
Google Cloud Spanner adapter for the SpannerClient interface.

Wraps ``google-cloud-spanner``: every long-running admin operation is waited
on with ``operation.result(timeout)`` so callers get a plain blocking call.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, TypeVar

import grpc
from google.api_core import exceptions
from google.cloud import spanner
from google.cloud.spanner_admin_database_v1 import DatabaseDialect
from google.cloud.spanner_v1 import KeySet

from .spanner_client import DatabaseClient, SpannerClient, TransactionContext
from .types import Dialect, Mutation, MutationOp, Struct

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_OPERATION_TIMEOUT = 600.0

_DIALECTS = {
    Dialect.GOOGLE_STANDARD_SQL: DatabaseDialect.GOOGLE_STANDARD_SQL,
    Dialect.POSTGRESQL: DatabaseDialect.POSTGRESQL,
}


def apply_mutations(target, mutations: Iterable[Mutation]) -> None:
    """Apply mutations to a spanner Batch or Transaction, preserving order."""
    for mutation in mutations:
        if mutation.op is MutationOp.DELETE:
            target.delete(mutation.table, KeySet(keys=[list(key) for key in mutation.keys]))
        else:
            write = getattr(target, mutation.op.value)
            write(mutation.table, list(mutation.columns), [list(mutation.values)])


def _status_error(status) -> exceptions.GoogleAPICallError:
    """Turn a failed batch DML status into the matching api_core exception."""
    for code in grpc.StatusCode:
        if code.value[0] == status.code:
            return exceptions.from_grpc_status(code, status.message)
    return exceptions.Unknown(status.message)


class GoogleTransactionContext(TransactionContext):
    """TransactionContext over a ``google.cloud.spanner_v1.Transaction``."""

    def __init__(self, transaction):
        self._transaction = transaction

    def buffer(self, mutations: Iterable[Mutation]) -> None:
        apply_mutations(self._transaction, mutations)

    def batch_update(self, statements: Sequence[str]) -> List[int]:
        status, row_counts = self._transaction.batch_update(list(statements))
        if status.code != 0:
            raise _status_error(status)
        return list(row_counts)


class GoogleDatabaseClient(DatabaseClient):
    """DatabaseClient over a ``google.cloud.spanner_v1.Database``."""

    def __init__(self, database):
        self._database = database

    def write(self, mutations: Sequence[Mutation]) -> Optional[datetime]:
        with self._database.batch() as batch:
            apply_mutations(batch, mutations)
        return batch.committed

    def run_in_transaction(self, work: Callable[[TransactionContext], T]) -> T:
        return self._database.run_in_transaction(
            lambda transaction: work(GoogleTransactionContext(transaction))
        )

    def read(self, table: str, columns: Sequence[str]) -> Iterator[Struct]:
        # snapshot() defaults to a strong read
        with self._database.snapshot() as snapshot:
            results = snapshot.read(table=table, columns=list(columns), keyset=KeySet(all_=True))
            for row in results:
                yield Struct(columns=tuple(columns), values=tuple(row))


class GoogleSpannerClient(SpannerClient):
    """
    Production SpannerClient backed by ``google.cloud.spanner.Client``.

    Args:
        project_id: Google Cloud project owning the instances
        host: Optional custom API endpoint
        operation_timeout: Seconds to wait on each long-running operation
        client: Pre-built ``spanner.Client`` (mainly for tests)
    """

    def __init__(
        self,
        project_id: str,
        host: Optional[str] = None,
        operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
        client: Optional[spanner.Client] = None
    ):
        self.project_id = project_id
        self.operation_timeout = operation_timeout
        if client is None:
            client_options = {"api_endpoint": host} if host else None
            client = spanner.Client(project=project_id, client_options=client_options)
        self._client = client
        self._closed = False

    def _instance_config_name(self, instance_config: str) -> str:
        if instance_config.startswith("projects/"):
            return instance_config
        return f"projects/{self.project_id}/instanceConfigs/{instance_config}"

    def create_instance(
        self,
        instance_id: str,
        instance_config: str,
        display_name: str,
        node_count: int
    ) -> None:
        instance = self._client.instance(
            instance_id,
            configuration_name=self._instance_config_name(instance_config),
            display_name=display_name,
            node_count=node_count,
        )
        operation = instance.create()
        operation.result(self.operation_timeout)
        logger.debug(f"Instance {instance_id} is ready")

    def delete_instance(self, instance_id: str) -> None:
        self._client.instance(instance_id).delete()

    def create_database(self, instance_id: str, database_id: str, dialect: Dialect) -> None:
        database = self._client.instance(instance_id).database(
            database_id, database_dialect=_DIALECTS[dialect]
        )
        operation = database.create()
        operation.result(self.operation_timeout)
        logger.debug(f"Database {instance_id}/{database_id} is ready")

    def update_database_ddl(
        self,
        instance_id: str,
        database_id: str,
        statements: Sequence[str]
    ) -> None:
        database = self._client.instance(instance_id).database(database_id)
        operation = database.update_ddl(list(statements))
        operation.result(self.operation_timeout)

    def drop_database(self, instance_id: str, database_id: str) -> None:
        self._client.instance(instance_id).database(database_id).drop()

    def database_client(self, instance_id: str, database_id: str) -> DatabaseClient:
        return GoogleDatabaseClient(self._client.instance(instance_id).database(database_id))

    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._client.close()
        self._closed = True
