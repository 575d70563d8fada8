"""
Playground operation routes.

One POST endpoint per operation kind. Bodies are read raw so the executor
can report malformed JSON in the uniform envelope instead of FastAPI's
422 validation format.
"""
import logging

from fastapi import APIRouter, Request

from operations.kinds import OperationKind
from routes.deps import envelope_response, get_executor, unexpected_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["operations"])


async def _execute(kind: OperationKind, request: Request):
    try:
        executor = get_executor(request)
        body = await request.body()
        result = await executor.execute(kind, body)
    except Exception as e:
        logger.exception(f"Unexpected failure running {kind.value}")
        return unexpected_error_response(kind.store_operation, e)
    return envelope_response(result)


@router.post("/insert")
async def insert(request: Request):
    """Insert one document; the response shows its BSON form"""
    return await _execute(OperationKind.INSERT, request)


@router.post("/bulk-insert")
async def bulk_insert(request: Request):
    """Insert 1 to 100 documents in one call"""
    return await _execute(OperationKind.BULK_INSERT, request)


@router.post("/find")
async def find(request: Request):
    """Find documents (at most 100) with the query plan"""
    return await _execute(OperationKind.FIND, request)


@router.post("/update")
async def update(request: Request):
    """Update every document matching {filter, update}"""
    return await _execute(OperationKind.UPDATE, request)


@router.post("/delete")
async def delete(request: Request):
    """
    Delete every document matching the filter

    An empty filter {} deletes everything in the collection.
    """
    return await _execute(OperationKind.DELETE, request)


@router.post("/aggregate")
async def aggregate(request: Request):
    """Run an aggregation pipeline with a per-stage breakdown"""
    return await _execute(OperationKind.AGGREGATE, request)
