import logging
from datetime import datetime, timezone
from typing import Any

from bson import Code, DBRef, Decimal128, MaxKey, MinKey, ObjectId, Regex, Timestamp, json_util
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


def is_valid_object_id(identifier: Any):
    """
    Check that a path identifier is a canonical ObjectId string.

    The value must parse as an ObjectId and serialize back to exactly the
    same text, so upper-case hex is rejected even though it parses.

    Args:
        identifier (Any): Identifier taken from the path segment.

    Returns:
        bool: True when the identifier is safe to use for writes.
    """
    if not isinstance(identifier, str) or not ObjectId.is_valid(identifier):
        return False
    return str(ObjectId(identifier)) == identifier


def find_by_identifier(collection: Collection, identifier: str):
    """
    Locate a document whose ``_id`` is stored as an ObjectId or as a string.

    Args:
        collection (Collection): MongoDB collection handle.
        identifier (str): Identifier supplied by the client.

    Returns:
        dict | None: Matching document or None.
    """
    if ObjectId.is_valid(identifier):
        document = None
        try:
            document = collection.find_one({"_id": ObjectId(identifier)})
        except (InvalidId, TypeError, PyMongoError) as exc:
            logger.debug("ObjectId lookup for %s failed, retrying as string: %s", identifier, exc)
        if document:
            return document

    # Some documents keep their _id as a plain string
    return collection.find_one({"_id": identifier})


def find_missing_fields(required_fields: list[str] | tuple[str, ...], payload: Any):
    """
    List required fields that are absent or null in a payload.

    Args:
        required_fields (list[str] | tuple[str, ...]): Field names in the order to report them.
        payload (Any): Request body, treated as empty when it is not a dict.

    Returns:
        list[str]: Missing field names, empty when the payload is complete.
    """
    if not isinstance(payload, dict):
        payload = {}
    return [field for field in required_fields if payload.get(field) is None]


def build_document(required_fields: list[str] | tuple[str, ...], payload: dict):
    """
    Keep only the tracked fields of a payload.

    Args:
        required_fields (list[str] | tuple[str, ...]): Tracked field names.
        payload (dict): Validated request body.

    Returns:
        dict: Document ready to store.
    """
    return {field: payload.get(field) for field in required_fields}


def serialize_value(value: Any):
    """
    Convert BSON values nested anywhere in a value into JSON-friendly ones.

    Args:
        value (Any): Value read from MongoDB.

    Returns:
        Any: ObjectIds and Decimal128 as strings, other BSON types in extended JSON.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, dict):
        return {key: serialize_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(item) for item in value]
    if isinstance(value, (bytes, Code, DBRef, MaxKey, MinKey, Regex, Timestamp)):
        return json_util.default(value)
    return value


def serialize_document(document: dict | None):
    """
    Convert a MongoDB document into a dict for JSON output.

    Args:
        document (dict | None): Document from the collection.

    Returns:
        dict: Copy with ``_id`` stored as a string and nested BSON values converted.
    """
    if not document:
        return {}
    serialized = serialize_value(dict(document))
    if "_id" in serialized and not isinstance(serialized["_id"], str):
        serialized["_id"] = str(document["_id"])
    return serialized


def utc_timestamp_iso():
    """
    Return the current UTC timestamp in ISO 8601 format.

    Returns:
        str: Timestamp with millisecond precision suffixed with ``Z``.
    """
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
