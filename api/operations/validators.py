"""
Per-kind request shape validation.

One strategy per OperationKind. Each validate() returns the normalized
payload the executor should send on, or raises RequestShapeError with a
message naming the missing or invalid field. Validation never touches
the store.
"""
import logging
from typing import Any, Dict, List

from operations.errors import RequestShapeError
from operations.kinds import OperationKind

logger = logging.getLogger(__name__)


class InsertValidator:
    """Insert takes exactly one JSON object"""

    def validate(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise RequestShapeError("Invalid JSON body: insert expects a single JSON object")
        return payload


class BulkInsertValidator:
    """Bulk insert takes 1..max_documents JSON objects.

    Oversized batches are rejected outright, never truncated.
    """

    def __init__(self, max_documents: int = 100):
        self.max_documents = max_documents

    def validate(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, list):
            raise RequestShapeError("Request body must be an array of documents")
        if not payload:
            raise RequestShapeError("Array cannot be empty")
        if len(payload) > self.max_documents:
            raise RequestShapeError(
                f"Maximum {self.max_documents} documents allowed per bulk insert"
            )
        for position, document in enumerate(payload):
            if not isinstance(document, dict):
                raise RequestShapeError(f"Document at index {position} must be a JSON object")
        return payload


class FindValidator:
    """Find takes any filter object; absent means match all"""

    def validate(self, payload: Any) -> Dict[str, Any]:
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise RequestShapeError("Invalid filter query: find expects a JSON object")
        return payload


class UpdateValidator:
    """Update takes {filter, update}, both objects.

    The update document may only hold operators ($set, $inc, ...) because
    the executor merges a server timestamp into its $set.
    """

    def validate(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict) or 'filter' not in payload or 'update' not in payload:
            raise RequestShapeError('Request must include "filter" and "update" fields')
        if not isinstance(payload['filter'], dict):
            raise RequestShapeError('"filter" must be a JSON object')
        update = payload['update']
        if not isinstance(update, dict):
            raise RequestShapeError('"update" must be a JSON object')
        plain_keys = [key for key in update if not key.startswith('$')]
        if plain_keys:
            raise RequestShapeError(
                f'"update" must only contain update operators such as $set (found: {", ".join(plain_keys)})'
            )
        if '$set' in update and not isinstance(update['$set'], dict):
            raise RequestShapeError('"$set" must be a JSON object')
        return payload


class DeleteValidator:
    """Delete takes a filter object. {} is legal and deletes everything."""

    def validate(self, payload: Any) -> Dict[str, Any]:
        if not isinstance(payload, dict):
            raise RequestShapeError("Invalid filter query: delete expects a JSON object")
        if not payload:
            logger.warning("Delete with an empty filter matches every document in the collection")
        return payload


class AggregateValidator:
    """Aggregate takes an ordered list of single-operator stage objects"""

    def validate(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, list):
            raise RequestShapeError("Aggregation pipeline must be an array")
        for position, stage in enumerate(payload, start=1):
            if not isinstance(stage, dict):
                raise RequestShapeError(f"Pipeline stage {position} must be a JSON object")
            if len(stage) != 1:
                raise RequestShapeError(
                    f"Pipeline stage {position} must have exactly one operator (found {len(stage)})"
                )
        return payload


def build_validators(bulk_insert_max: int = 100) -> Dict[OperationKind, Any]:
    """Map every kind to its validation strategy"""
    return {
        OperationKind.INSERT: InsertValidator(),
        OperationKind.BULK_INSERT: BulkInsertValidator(bulk_insert_max),
        OperationKind.FIND: FindValidator(),
        OperationKind.UPDATE: UpdateValidator(),
        OperationKind.DELETE: DeleteValidator(),
        OperationKind.AGGREGATE: AggregateValidator(),
    }
