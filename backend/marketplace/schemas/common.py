from typing import Any

from bson import ObjectId
from pydantic import BaseModel


def serialize_document(value: Any) -> Any:
    """Replace ObjectId values (at any depth) with their hex string."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, list):
        return [serialize_document(item) for item in value]
    return value


class InsertResponse(BaseModel):
    acknowledged: bool = True
    insertedId: str


class MessageResponse(BaseModel):
    message: str
