"""Health/insight view derived from a performance log snapshot.

Nothing is persisted: every call scans the entries it is given.
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from value_objects import PerformanceEntry


@dataclass(frozen=True)
class PerformanceInsights:
    total: int
    collection_scans: int
    indexed_queries: int
    average_latency_ms: float
    slowest_operation: Optional[Dict[str, Any]]
    status: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total': self.total,
            'collectionScans': self.collection_scans,
            'indexedQueries': self.indexed_queries,
            'averageLatency': self.average_latency_ms,
            'slowestOperation': self.slowest_operation,
            'status': self.status,
            'message': self.message,
        }


def summarize(entries: Iterable[PerformanceEntry]) -> PerformanceInsights:
    """Aggregate a snapshot into the health view"""
    snapshot = list(entries)
    scans = sum(1 for e in snapshot if e.is_collection_scan)
    indexed = sum(1 for e in snapshot if e.index_used and not e.is_collection_scan)
    average = _average_latency(snapshot)
    slowest = max(snapshot, key=lambda e: e.execution_time_ms, default=None)

    return PerformanceInsights(
        total=len(snapshot),
        collection_scans=scans,
        indexed_queries=indexed,
        average_latency_ms=average,
        slowest_operation=slowest.to_dict() if slowest else None,
        status="warning" if scans else "optimal",
        message=_health_message(scans),
    )


def _average_latency(entries) -> float:
    if not entries:
        return 0.0
    return round(sum(e.execution_time_ms for e in entries) / len(entries), 2)


def _health_message(scans: int) -> str:
    if scans:
        return (
            f"{scans} recent quer{'y' if scans == 1 else 'ies'} used COLLSCAN, "
            "which might be slow on larger datasets. Consider adding an index."
        )
    return "No collection scans detected in recent queries."
