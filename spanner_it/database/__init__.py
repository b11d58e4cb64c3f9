"""
Database package for Spanner IT resources.

Provides the Spanner client seam, its Google Cloud adapter and the value
types passed across it.
"""

from .types import Dialect, Mutation, MutationOp, Struct
from .spanner_client import DatabaseClient, SpannerClient, TransactionContext

__all__ = [
    'Dialect',
    'Mutation',
    'MutationOp',
    'Struct',
    'DatabaseClient',
    'SpannerClient',
    'TransactionContext'
]
