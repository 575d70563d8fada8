"""
Store package - the MongoDB side of the playground.

- MongoGateway: single-client, single-collection sync gateway
- AsyncGatewayAdapter: asyncio.to_thread() facade for API routes
- bson_codec: extended JSON decoding/encoding helpers
"""

from .gateway import MongoGateway
from .async_adapter import AsyncGatewayAdapter
from .bson_codec import PayloadDecodeError, decode_payload, to_jsonable

__all__ = [
    'MongoGateway',
    'AsyncGatewayAdapter',
    'PayloadDecodeError',
    'decode_payload',
    'to_jsonable',
]
