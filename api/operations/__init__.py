"""Operations layer for MongoFlow Studio.

This package handles API-facing operations:
- Operation execution (OperationExecutor) for the six playground kinds
- Per-kind request validation (validators)
- Explain interpretation (QueryPlan)
- Collection administration (CollectionAdmin): stats, reset, create-index

Principles:
- Single Responsibility Principle
- Dependency Injection
"""

from .errors import OperationError, RequestShapeError, StoreError
from .kinds import OperationKind
from .operation_executor import OperationExecutor
from .collection_admin import CollectionAdmin
from .query_plan import QueryPlan

__all__ = [
    'OperationError',
    'RequestShapeError',
    'StoreError',
    'OperationKind',
    'OperationExecutor',
    'CollectionAdmin',
    'QueryPlan',
]
