"""
Spanner Client Interface

Narrow, blocking seam over the Cloud Spanner control plane (instances,
databases, schema) and data plane (writes, transactions, reads). The resource
manager only talks to Spanner through these classes, so tests can substitute
an in-memory double for the production adapter.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from .types import Dialect, Mutation, Struct

T = TypeVar("T")


class TransactionContext(ABC):
    """Handle passed to the work function of a read-write transaction."""

    @abstractmethod
    def buffer(self, mutations: Iterable[Mutation]) -> None:
        """Buffer mutations to be applied when the transaction commits."""

    @abstractmethod
    def batch_update(self, statements: Sequence[str]) -> List[int]:
        """Execute DML statements as one batch, returning per-statement row counts."""


class DatabaseClient(ABC):
    """Data-plane operations scoped to a single database."""

    @abstractmethod
    def write(self, mutations: Sequence[Mutation]) -> Optional[datetime]:
        """Apply mutations atomically outside a transaction, returning the commit timestamp."""

    @abstractmethod
    def run_in_transaction(self, work: Callable[[TransactionContext], T]) -> T:
        """Run ``work`` inside a read-write transaction and commit it."""

    @abstractmethod
    def read(self, table: str, columns: Sequence[str]) -> Iterable[Struct]:
        """Strongly consistent single-use read of every row of ``table``."""


class SpannerClient(ABC):
    """
    Control-plane operations plus access to database clients.

    Every long-running operation blocks until it finishes or fails; callers
    never see futures.
    """

    @abstractmethod
    def create_instance(
        self,
        instance_id: str,
        instance_config: str,
        display_name: str,
        node_count: int
    ) -> None:
        """Create an instance and wait for it to become ready."""

    @abstractmethod
    def delete_instance(self, instance_id: str) -> None:
        """Delete an instance and every database in it."""

    @abstractmethod
    def create_database(self, instance_id: str, database_id: str, dialect: Dialect) -> None:
        """Create an empty database and wait for it to become ready."""

    @abstractmethod
    def update_database_ddl(
        self,
        instance_id: str,
        database_id: str,
        statements: Sequence[str]
    ) -> None:
        """Apply schema statements and wait for the update to finish."""

    @abstractmethod
    def drop_database(self, instance_id: str, database_id: str) -> None:
        """Drop a database, leaving its instance in place."""

    @abstractmethod
    def database_client(self, instance_id: str, database_id: str) -> DatabaseClient:
        """Return a data-plane client for the given database."""

    @abstractmethod
    def is_closed(self) -> bool:
        """Whether ``close`` has been called."""

    @abstractmethod
    def close(self) -> None:
        """Release the underlying transport."""
