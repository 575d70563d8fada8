"""
Conversions between request JSON, BSON values and response JSON.

Request bodies are decoded with bson.json_util so learners can write
extended JSON such as {"_id": {"$oid": "..."}} in filters. Responses are
encoded back to relaxed extended JSON, which renders ObjectId as
{"$oid": ...} and datetimes as {"$date": ...}.
"""
import json
from datetime import datetime, timezone
from typing import Any

from bson import json_util
from bson.errors import BSONError
from bson.objectid import ObjectId


class PayloadDecodeError(ValueError):
    """Request text is not valid (extended) JSON"""
    pass


def decode_payload(raw: Any) -> Any:
    """Decode raw request text into Python/BSON values.

    Already-decoded values (dicts, lists, None) pass through untouched.
    An empty body decodes to None. Bytes must be valid UTF-8.
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PayloadDecodeError(str(e)) from e
    if not isinstance(raw, str):
        return raw
    if not raw.strip():
        return None
    try:
        return json_util.loads(raw)
    except (ValueError, TypeError, BSONError) as e:
        raise PayloadDecodeError(str(e)) from e


def to_jsonable(value: Any) -> Any:
    """Convert BSON-bearing values into plain JSON-safe structures"""
    if value is None:
        return None
    return json.loads(json_util.dumps(value, json_options=json_util.RELAXED_JSON_OPTIONS))


def server_timestamp() -> datetime:
    """Current UTC time truncated to BSON's millisecond precision"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def tagged_oid(object_id: ObjectId) -> dict:
    return {"$oid": str(object_id)}


def tagged_date(moment: datetime) -> dict:
    iso = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return {"$date": iso.replace("+00:00", "Z")}
