"""
Collection administration routes

- GET /api/stats: collection statistics (zero-valued before first insert)
- POST /api/reset: delete every document (demo teardown only)
- POST /api/create-index: create an index on the playground collection
"""
import logging

from fastapi import APIRouter, Request

from routes.deps import envelope_response, get_collection_admin, unexpected_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["collection"])


@router.get("/stats")
async def stats(request: Request):
    """Collection statistics and index list"""
    try:
        result = await get_collection_admin(request).stats()
    except Exception as e:
        logger.exception("Unexpected failure reading collection stats")
        return unexpected_error_response('collStats', e)
    return envelope_response(result)


@router.post("/reset")
async def reset(request: Request):
    """Delete all documents. Destructive and irreversible."""
    try:
        result = await get_collection_admin(request).reset()
    except Exception as e:
        logger.exception("Unexpected failure resetting collection")
        return unexpected_error_response('deleteMany (reset)', e)
    return envelope_response(result)


@router.post("/create-index")
async def create_index(request: Request):
    """Create an index from {key, name?, options?: {unique, sparse}}"""
    try:
        body = await request.body()
        result = await get_collection_admin(request).create_index(body)
    except Exception as e:
        logger.exception("Unexpected failure creating index")
        return unexpected_error_response('createIndex', e)
    return envelope_response(result)
