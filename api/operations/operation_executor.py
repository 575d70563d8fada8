"""
Operation execution pipeline.

execute(kind, raw_payload) always returns an OperationResult envelope:

1. input    - decode JSON, validate the per-kind shape (400 on failure,
              the store is never contacted)
2. prepare  - build the store request (server timestamps, limits)
3. remote   - the store round trip; the only span Metrics times
4. store    - interpret driver results and explain output
5. decode   - convert BSON values into the JSON envelope

Every run that reached the store, successful or not, is appended to the
performance log. Shape failures are not, since they carry no execution
metrics.
"""
import asyncio
import logging
from typing import Any, Awaitable, Dict, List, Optional

from bson.errors import BSONError
from bson.objectid import ObjectId
from pymongo.errors import PyMongoError

from config import LimitsConfig
from operations.errors import RequestShapeError, StoreError
from operations.kinds import OperationKind
from operations.query_plan import QueryPlan
from operations.stopwatch import Stopwatch
from operations.validators import build_validators
from store.bson_codec import (
    PayloadDecodeError, decode_payload, server_timestamp,
    tagged_date, tagged_oid, to_jsonable
)
from telemetry.progress_tracker import ProgressTracker, StageStatus
from value_objects import Metrics, OperationResult, PerformanceEntry

logger = logging.getLogger(__name__)

INVALID_JSON = "Invalid JSON format"

# BSON encoding raises OverflowError for integers wider than 8 bytes
STORE_ERRORS = (PyMongoError, BSONError, OverflowError)


class _Run:
    """Stage and timing bookkeeping for one execute() call"""

    def __init__(self, kind: OperationKind, tracker: ProgressTracker, clock=None):
        self.kind = kind
        self.tracker = tracker
        self.total = Stopwatch(clock)
        self.store_watch: Optional[Stopwatch] = None
        self.store_ms: Optional[float] = None

    async def remote(self, awaitable: Awaitable) -> Any:
        """Run the store round trip, timing only that span"""
        self.tracker.advance("prepare", StageStatus.COMPLETED, "Request prepared")
        self.tracker.advance("remote", StageStatus.ACTIVE, f"{self.kind.value.upper()}...")
        self.store_watch = Stopwatch(self.total.clock)
        outcome = await self.call(awaitable)
        self.store_ms = self.store_watch.elapsed_ms()
        self.tracker.advance("remote", StageStatus.COMPLETED, f"{self.store_ms}ms")
        self.tracker.advance("store", StageStatus.ACTIVE, "Processing...")
        return outcome

    async def call(self, awaitable: Awaitable) -> Any:
        """Await a store call, translating driver errors into StoreError"""
        try:
            return await awaitable
        except STORE_ERRORS as e:
            raise StoreError(str(e)) from e

    def decoding(self) -> None:
        self.tracker.advance("store", StageStatus.COMPLETED, self.kind.store_operation)
        self.tracker.advance("decode", StageStatus.ACTIVE, "Converting...")

    def elapsed_ms(self) -> float:
        """Store time when measured, else time since the run started"""
        if self.store_ms is not None:
            return self.store_ms
        if self.store_watch is not None:
            return self.store_watch.elapsed_ms()
        return self.total.elapsed_ms()

    def metrics(self, **fields) -> Metrics:
        return Metrics(
            execution_time_ms=self.elapsed_ms(),
            operation=self.kind.store_operation,
            **fields
        )


class OperationExecutor:
    """Validates, runs and packages the six playground operations.

    Args:
        gateway: async gateway (AsyncGatewayAdapter or compatible)
        performance_log: PerformanceLog receiving one entry per store attempt
        limits: find cap and bulk insert maximum
        clock: perf_counter-style clock, injectable for tests
    """

    def __init__(self, gateway, performance_log=None, limits: Optional[LimitsConfig] = None,
                 clock=None):
        self.gateway = gateway
        self.performance_log = performance_log
        self.limits = limits or LimitsConfig()
        self.clock = clock
        self._validators = build_validators(self.limits.bulk_insert_max)
        self._handlers = {
            OperationKind.INSERT: self._insert,
            OperationKind.BULK_INSERT: self._bulk_insert,
            OperationKind.FIND: self._find,
            OperationKind.UPDATE: self._update,
            OperationKind.DELETE: self._delete,
            OperationKind.AGGREGATE: self._aggregate,
        }

    async def execute(self, kind: OperationKind, raw_payload: Any,
                      tracker: Optional[ProgressTracker] = None) -> OperationResult:
        """Run one operation and return its envelope"""
        tracker = tracker or ProgressTracker()
        run = _Run(kind, tracker, self.clock)
        tracker.begin("Validating JSON...")

        try:
            payload = self._validate(kind, raw_payload)
        except RequestShapeError as e:
            return self._reject(run, str(e))
        tracker.advance("input", StageStatus.COMPLETED, "JSON validated")
        tracker.advance("prepare", StageStatus.ACTIVE, "Preparing request...")

        try:
            result = await self._handlers[kind](payload, run)
        except StoreError as e:
            result = self._store_failure(run, str(e))
        else:
            tracker.advance("decode", StageStatus.COMPLETED, "Complete")

        self._record(result)
        return result.with_flow(tracker.snapshot())

    def _validate(self, kind: OperationKind, raw_payload: Any) -> Any:
        try:
            payload = decode_payload(raw_payload)
        except PayloadDecodeError:
            raise RequestShapeError(INVALID_JSON) from None
        return self._validators[kind].validate(payload)

    def _reject(self, run: _Run, message: str) -> OperationResult:
        logger.info(f"{run.kind.value} rejected: {message}")
        run.tracker.fail(message)
        result = OperationResult.rejected(message, run.metrics())
        return result.with_flow(run.tracker.snapshot())

    def _store_failure(self, run: _Run, message: str) -> OperationResult:
        logger.warning(f"{run.kind.store_operation} failed: {message}")
        run.tracker.fail(message)
        return OperationResult.failed(message, run.metrics())

    def _record(self, result: OperationResult) -> None:
        if self.performance_log is not None and result.reached_store:
            self.performance_log.record(PerformanceEntry.from_metrics(result.metrics))

    # === Handlers ===

    async def _insert(self, document: Dict[str, Any], run: _Run) -> OperationResult:
        created_at = server_timestamp()
        to_store = {**document, '_createdAt': created_at}

        insert_result = await run.remote(self.gateway.insert_one(to_store))
        inserted_id = insert_result.inserted_id
        stored = await run.call(self.gateway.find_one({'_id': inserted_id}))

        run.decoding()
        original = to_jsonable(document)
        converted = {
            **original,
            '_id': _tag_id(inserted_id),
            '_createdAt': tagged_date(created_at),
        }
        data = {
            'insertedId': str(inserted_id),
            'acknowledged': insert_result.acknowledged,
            'document': to_jsonable(stored if stored is not None else to_store),
        }
        return OperationResult.ok(
            data,
            run.metrics(documents_affected=1),
            bsonConversion={'original': original, 'converted': converted},
        )

    async def _bulk_insert(self, documents: List[Dict[str, Any]], run: _Run) -> OperationResult:
        created_at = server_timestamp()
        to_store = [{**document, '_createdAt': created_at} for document in documents]

        result = await run.remote(self.gateway.insert_many(to_store))

        run.decoding()
        inserted_ids = [str(i) for i in result.inserted_ids]
        count = len(inserted_ids)
        metrics = run.metrics(
            documents_affected=count,
            counters={
                'documentsInserted': count,
                'avgTimePerDocument': round(run.elapsed_ms() / count, 2) if count else 0,
            },
        )
        data = {
            'insertedCount': count,
            'insertedIds': inserted_ids,
            'acknowledged': result.acknowledged,
        }
        return OperationResult.ok(data, metrics)

    async def _find(self, filter: Dict[str, Any], run: _Run) -> OperationResult:
        limit = self.limits.find_limit

        documents, explain = await run.remote(asyncio.gather(
            self.gateway.find(filter, limit),
            self.gateway.explain_find(filter),
        ))
        plan = QueryPlan.from_explain(explain)

        run.decoding()
        metrics = run.metrics(
            documents_examined=plan.documents_examined,
            documents_returned=len(documents),
            index_used=plan.index_used,
        )
        data = {'documents': to_jsonable(documents), 'count': len(documents)}
        return OperationResult.ok(data, metrics, queryPlan=to_jsonable(plan.to_dict()))

    async def _update(self, payload: Dict[str, Any], run: _Run) -> OperationResult:
        update = with_update_timestamp(payload['update'])

        result = await run.remote(self.gateway.update_many(payload['filter'], update))

        run.decoding()
        metrics = run.metrics(
            documents_affected=result.modified_count,
            counters={
                'documentsMatched': result.matched_count,
                'documentsModified': result.modified_count,
            },
        )
        data = {
            'matchedCount': result.matched_count,
            'modifiedCount': result.modified_count,
            'acknowledged': result.acknowledged,
        }
        return OperationResult.ok(data, metrics)

    async def _delete(self, filter: Dict[str, Any], run: _Run) -> OperationResult:
        result = await run.remote(self.gateway.delete_many(filter))

        run.decoding()
        metrics = run.metrics(
            documents_affected=result.deleted_count,
            counters={'documentsDeleted': result.deleted_count},
        )
        data = {'deletedCount': result.deleted_count, 'acknowledged': result.acknowledged}
        return OperationResult.ok(data, metrics)

    async def _aggregate(self, pipeline: List[Dict[str, Any]], run: _Run) -> OperationResult:
        results, explain = await run.remote(asyncio.gather(
            self.gateway.aggregate(pipeline),
            self.gateway.explain_aggregate(pipeline),
        ))
        plan = QueryPlan.from_explain(explain)

        run.decoding()
        metrics = run.metrics(
            documents_examined=plan.documents_examined,
            documents_returned=len(results),
            index_used=plan.index_used,
            counters={'stagesExecuted': len(pipeline)},
        )
        data = {'results': to_jsonable(results), 'count': len(results)}
        return OperationResult.ok(
            data,
            metrics,
            pipeline=describe_pipeline(pipeline),
            queryPlan=to_jsonable(plan.to_dict()),
        )


def with_update_timestamp(update: Dict[str, Any], moment=None) -> Dict[str, Any]:
    """Copy of `update` whose $set also carries a server-side _updatedAt.

    Other operators are left exactly as the caller wrote them.
    """
    effective = dict(update)
    effective['$set'] = {
        **(update.get('$set') or {}),
        '_updatedAt': moment or server_timestamp(),
    }
    return effective


def describe_pipeline(pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Per-stage echo: 1-based number, operator name, stage body"""
    return [
        {
            'stage': number,
            'operator': next(iter(stage)),
            'details': to_jsonable(stage),
        }
        for number, stage in enumerate(pipeline, start=1)
    ]


def _tag_id(inserted_id: Any) -> Any:
    if isinstance(inserted_id, ObjectId):
        return tagged_oid(inserted_id)
    return to_jsonable(inserted_id)
