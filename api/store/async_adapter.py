"""
Async adapter for MongoGateway using thread pool execution.

Wraps the sync gateway and runs each call with asyncio.to_thread() so
FastAPI routes never block the event loop on a driver round trip.
The adapter does not own the connection; closing it is a no-op.
"""

import asyncio
from typing import Any, Dict, List, Optional


class AsyncGatewayAdapter:
    """Async facade over MongoGateway with the same method names."""

    def __init__(self, gateway):
        """Initialize adapter with sync MongoGateway.

        Args:
            gateway: MongoGateway instance to wrap
        """
        self._gateway = gateway

    async def insert_one(self, document: Dict[str, Any]):
        return await asyncio.to_thread(self._gateway.insert_one, document)

    async def insert_many(self, documents: List[Dict[str, Any]]):
        return await asyncio.to_thread(self._gateway.insert_many, documents)

    async def update_many(self, filter: Dict[str, Any], update: Dict[str, Any]):
        return await asyncio.to_thread(self._gateway.update_many, filter, update)

    async def delete_many(self, filter: Dict[str, Any]):
        return await asyncio.to_thread(self._gateway.delete_many, filter)

    async def reset(self):
        return await asyncio.to_thread(self._gateway.reset)

    async def create_index(self, keys: Dict[str, Any], name: Optional[str] = None,
                           unique: bool = False, sparse: bool = False) -> str:
        return await asyncio.to_thread(
            self._gateway.create_index, keys, name, unique, sparse
        )

    async def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await asyncio.to_thread(self._gateway.find_one, filter)

    async def find(self, filter: Dict[str, Any], limit: int) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._gateway.find, filter, limit)

    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._gateway.aggregate, pipeline)

    async def explain_find(self, filter: Dict[str, Any]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._gateway.explain_find, filter)

    async def explain_aggregate(self, pipeline: List[Dict[str, Any]]) -> Dict[str, Any]:
        return await asyncio.to_thread(self._gateway.explain_aggregate, pipeline)

    async def collection_stats(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._gateway.collection_stats)

    async def list_indexes(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self._gateway.list_indexes)

    async def count_documents(self) -> int:
        return await asyncio.to_thread(self._gateway.count_documents)

    async def ping(self) -> bool:
        return await asyncio.to_thread(self._gateway.ping)

    async def close(self):
        """No-op: the wrapped gateway's lifecycle belongs to AppState."""
        pass
