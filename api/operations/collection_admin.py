"""
Collection administration: stats, reset and index creation.

These sit beside the six playground operations but are not part of the
executor pipeline: they have no progress stages and are not written to the
performance log (stats is polled by the UI, which would flood the log).
"""
import asyncio
import logging
from typing import Any, Dict

from bson.errors import BSONError
from pymongo.errors import OperationFailure, PyMongoError

from operations.errors import RequestShapeError
from operations.stopwatch import Stopwatch
from store.bson_codec import PayloadDecodeError, decode_payload, to_jsonable
from value_objects import Metrics, OperationResult

logger = logging.getLogger(__name__)

NAMESPACE_NOT_FOUND = 26

EMPTY_STATS = {
    'documentCount': 0,
    'storageSize': 0,
    'avgObjSize': 0,
    'indexCount': 0,
    'indexes': [],
    'totalIndexSize': 0,
}


def is_namespace_missing(error: OperationFailure) -> bool:
    """collStats on a never-created collection reports "ns not found" """
    return error.code == NAMESPACE_NOT_FOUND or 'ns not found' in str(error)


class CollectionAdmin:
    """Stats, reset and create-index against the playground collection"""

    def __init__(self, gateway, clock=None):
        self.gateway = gateway
        self.clock = clock

    async def stats(self) -> OperationResult:
        """Collection statistics; a missing collection is a zero-valued success"""
        watch = Stopwatch(self.clock)
        try:
            stats, indexes, count = await asyncio.gather(
                self.gateway.collection_stats(),
                self.gateway.list_indexes(),
                self.gateway.count_documents(),
            )
        except OperationFailure as e:
            if is_namespace_missing(e):
                return OperationResult.ok(dict(EMPTY_STATS), self._metrics(watch, 'collStats'))
            return self._failed(watch, 'collStats', e)
        except PyMongoError as e:
            return self._failed(watch, 'collStats', e)

        data = {
            'documentCount': count,
            'storageSize': stats.get('storageSize', 0),
            'avgObjSize': stats.get('avgObjSize') or 0,
            'indexCount': len(indexes),
            'indexes': [
                {
                    'name': index.get('name'),
                    'key': to_jsonable(dict(index.get('key', {}))),
                    'unique': bool(index.get('unique', False)),
                }
                for index in indexes
            ],
            'totalIndexSize': stats.get('totalIndexSize', 0),
        }
        return OperationResult.ok(data, self._metrics(watch, 'collStats'))

    async def reset(self) -> OperationResult:
        """Delete every document. Destructive and irreversible."""
        operation = 'deleteMany (reset)'
        watch = Stopwatch(self.clock)
        try:
            result = await self.gateway.reset()
        except PyMongoError as e:
            return self._failed(watch, operation, e)

        metrics = self._metrics(
            watch, operation,
            documents_affected=result.deleted_count,
            counters={'documentsDeleted': result.deleted_count},
        )
        data = {
            'deletedCount': result.deleted_count,
            'message': 'Database has been reset successfully',
        }
        return OperationResult.ok(data, metrics)

    async def create_index(self, raw_body: Any) -> OperationResult:
        """Create an index from {key, name?, options?: {unique, sparse}}"""
        operation = 'createIndex'
        watch = Stopwatch(self.clock)
        try:
            key, name, options = self._parse_index_request(raw_body)
        except RequestShapeError as e:
            return OperationResult.rejected(str(e), self._metrics(watch, operation))

        watch.restart()
        try:
            index_name = await self.gateway.create_index(
                key, name, options['unique'], options['sparse']
            )
        except (PyMongoError, BSONError) as e:
            return self._failed(watch, operation, e)

        data = {
            'indexName': index_name,
            'key': to_jsonable(key),
            'options': {'name': name, **options},
        }
        return OperationResult.ok(data, self._metrics(watch, operation))

    @staticmethod
    def _parse_index_request(raw_body: Any):
        try:
            body = decode_payload(raw_body)
        except PayloadDecodeError:
            raise RequestShapeError("Invalid JSON format") from None
        if not isinstance(body, dict):
            raise RequestShapeError("Invalid JSON body")

        key = body.get('key')
        if not isinstance(key, dict) or not key:
            raise RequestShapeError('Request must include "key" field with index specification')

        name = body.get('name')
        if name is not None and not isinstance(name, str):
            raise RequestShapeError('"name" must be a string')

        options = body.get('options') or {}
        if not isinstance(options, dict):
            raise RequestShapeError('"options" must be a JSON object')
        return key, name, {
            'unique': bool(options.get('unique', False)),
            'sparse': bool(options.get('sparse', False)),
        }

    @staticmethod
    def _metrics(watch: Stopwatch, operation: str, **fields) -> Metrics:
        return Metrics(execution_time_ms=watch.elapsed_ms(), operation=operation, **fields)

    def _failed(self, watch: Stopwatch, operation: str, error: Exception) -> OperationResult:
        logger.warning(f"{operation} failed: {error}")
        return OperationResult.failed(str(error), self._metrics(watch, operation))
