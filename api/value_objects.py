"""
Value objects for MongoFlow Studio.

Principles:
- Immutable data structures
- Named instead of primitive types (no Primitive Obsession)
- Small, focused classes with single responsibility
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

COLLECTION_SCAN = "COLLSCAN"

@dataclass(frozen=True)
class Metrics:
    """Execution metrics attached to every envelope, success or failure.

    On failure only execution_time_ms and operation are meaningful.
    Kind-specific counters (documentsInserted, stagesExecuted, ...) travel
    in `counters` and are flattened into the wire format.
    """
    execution_time_ms: float
    operation: str
    documents_affected: Optional[int] = None
    documents_examined: Optional[int] = None
    documents_returned: Optional[int] = None
    index_used: Optional[str] = None
    counters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Wire format: camelCase keys, absent counters omitted"""
        data: Dict[str, Any] = {
            'executionTime': self.execution_time_ms,
            'operation': self.operation,
        }
        optional = {
            'documentsAffected': self.documents_affected,
            'documentsExamined': self.documents_examined,
            'documentsReturned': self.documents_returned,
            'indexUsed': self.index_used,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        data.update(self.counters)
        return data

@dataclass(frozen=True)
class OperationResult:
    """Uniform success/error envelope returned for every operation.

    Exactly one of data/error is meaningful depending on success.
    `extra` holds the optional diagnostic blocks: bsonConversion,
    pipeline and queryPlan.
    """
    success: bool
    metrics: Metrics
    data: Any = None
    error: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 200
    flow: List[Dict[str, Any]] = field(default_factory=list)
    reached_store: bool = False

    @classmethod
    def ok(cls, data: Any, metrics: Metrics, **extra) -> 'OperationResult':
        """Create a successful result"""
        return cls(success=True, data=data, metrics=metrics,
                   extra=extra, reached_store=True)

    @classmethod
    def rejected(cls, error: str, metrics: Metrics) -> 'OperationResult':
        """Create a result for a request that failed shape validation"""
        return cls(success=False, error=error, metrics=metrics, status_code=400)

    @classmethod
    def failed(cls, error: str, metrics: Metrics) -> 'OperationResult':
        """Create a result for a store-level failure"""
        return cls(success=False, error=error, metrics=metrics,
                   status_code=500, reached_store=True)

    def with_flow(self, flow: List[Dict[str, Any]]) -> 'OperationResult':
        return replace(self, flow=flow)

    def to_response(self) -> Dict[str, Any]:
        """Serialize to the HTTP response envelope"""
        body: Dict[str, Any] = {'success': self.success}
        if self.success:
            body['data'] = self.data
        else:
            body['error'] = self.error
        body['metrics'] = self.metrics.to_dict()
        body.update(self.extra)
        if self.flow:
            body['flow'] = self.flow
        return body

@dataclass(frozen=True)
class PerformanceEntry:
    """One executed-operation record in the performance log"""
    timestamp: int  # epoch milliseconds
    operation: str
    execution_time_ms: float
    documents_examined: Optional[int] = None
    documents_returned: Optional[int] = None
    index_used: Optional[str] = None

    @classmethod
    def from_metrics(cls, metrics: Metrics, timestamp: Optional[int] = None) -> 'PerformanceEntry':
        """Create an entry from an envelope's metrics"""
        if timestamp is None:
            timestamp = int(time.time() * 1000)
        return cls(
            timestamp=timestamp,
            operation=metrics.operation,
            execution_time_ms=metrics.execution_time_ms,
            documents_examined=metrics.documents_examined,
            documents_returned=metrics.documents_returned,
            index_used=metrics.index_used,
        )

    @property
    def is_collection_scan(self) -> bool:
        return self.index_used == COLLECTION_SCAN

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'operation': self.operation,
            'executionTime': self.execution_time_ms,
            'documentsExamined': self.documents_examined,
            'documentsReturned': self.documents_returned,
            'indexUsed': self.index_used,
        }
