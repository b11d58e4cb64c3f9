"""
Value types shared by the Spanner client adapters and the resource manager.
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from pydantic import BaseModel, ConfigDict


class Dialect(str, Enum):
    """SQL dialect of a Spanner database."""
    GOOGLE_STANDARD_SQL = "GOOGLE_STANDARD_SQL"
    POSTGRESQL = "POSTGRESQL"


class MutationOp(str, Enum):
    """Kind of write carried by a Mutation."""
    INSERT = "insert"
    UPDATE = "update"
    INSERT_OR_UPDATE = "insert_or_update"
    REPLACE = "replace"
    DELETE = "delete"


class Mutation(BaseModel):
    """
    A single write against one table.

    Row mutations carry matching ``columns``/``values``; delete mutations carry
    the primary keys to remove in ``keys``.
    """
    model_config = ConfigDict(frozen=True)

    op: MutationOp
    table: str
    columns: Tuple[str, ...] = ()
    values: Tuple[Any, ...] = ()
    keys: Tuple[Tuple[Any, ...], ...] = ()

    @classmethod
    def _row(cls, op: MutationOp, table: str, row: Mapping[str, Any]) -> "Mutation":
        if not row:
            raise ValueError(f"{op.value} mutation on {table} needs at least one column")
        return cls(op=op, table=table, columns=tuple(row.keys()), values=tuple(row.values()))

    @classmethod
    def insert(cls, table: str, row: Mapping[str, Any]) -> "Mutation":
        return cls._row(MutationOp.INSERT, table, row)

    @classmethod
    def update(cls, table: str, row: Mapping[str, Any]) -> "Mutation":
        return cls._row(MutationOp.UPDATE, table, row)

    @classmethod
    def insert_or_update(cls, table: str, row: Mapping[str, Any]) -> "Mutation":
        return cls._row(MutationOp.INSERT_OR_UPDATE, table, row)

    @classmethod
    def replace(cls, table: str, row: Mapping[str, Any]) -> "Mutation":
        return cls._row(MutationOp.REPLACE, table, row)

    @classmethod
    def delete(cls, table: str, *keys: Sequence[Any]) -> "Mutation":
        if not keys:
            raise ValueError(f"delete mutation on {table} needs at least one key")
        return cls(op=MutationOp.DELETE, table=table, keys=tuple(tuple(key) for key in keys))

    def as_row(self) -> Dict[str, Any]:
        """Column -> value mapping of a row mutation."""
        return dict(zip(self.columns, self.values))


class Struct(BaseModel):
    """One row read back from a table, columns kept in read order."""
    model_config = ConfigDict(frozen=True)

    columns: Tuple[str, ...]
    values: Tuple[Any, ...]

    @classmethod
    def of(cls, row: Mapping[str, Any]) -> "Struct":
        return cls(columns=tuple(row.keys()), values=tuple(row.values()))

    def __getitem__(self, column: str) -> Any:
        try:
            return self.values[self.columns.index(column)]
        except ValueError:
            raise KeyError(column)

    def to_dict(self) -> Dict[str, Any]:
        return dict(zip(self.columns, self.values))


def column_list(columns: Sequence[str]) -> List[str]:
    """Validate and copy a column selection."""
    resolved = list(columns)
    if not resolved:
        raise ValueError("At least one column must be selected")
    return resolved
