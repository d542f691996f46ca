"""
MongoDB access helpers.

The client is created lazily on first use so importing this module never
opens a connection.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

from config import Settings, get_settings
from exceptions import InvalidArgumentError

logger = structlog.get_logger(__name__)

_client: Optional[MongoClient] = None


def get_client(settings: Optional[Settings] = None) -> MongoClient:
    global _client
    if _client is None:
        settings = settings or get_settings()
        _client = MongoClient(
            settings.DATABASE_URL,
            serverSelectionTimeoutMS=settings.DATABASE_TIMEOUT_MS,
            tz_aware=True,
        )
        logger.info("MongoDB client created", database=settings.DATABASE_NAME)
    return _client


def get_db(settings: Optional[Settings] = None) -> Database:
    settings = settings or get_settings()
    return get_client(settings)[settings.DATABASE_NAME]


def close_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("MongoDB client closed")


# ----------------------
# Document helpers
# ----------------------

def to_object_id(id_str: str) -> ObjectId:
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        raise InvalidArgumentError("Invalid ID format")


def to_document(model: BaseModel) -> Dict[str, Any]:
    """Model -> Mongo document. Dates become ISO strings, `id` is dropped."""
    return model.model_dump(mode="json", exclude={"id"})


def serialize(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return doc
    d = {**doc}
    if d.get("_id") is not None:
        d["id"] = str(d.pop("_id"))
    return d


def create_document(db: Database, collection_name: str, model: BaseModel) -> str:
    doc = to_document(model)
    now = datetime.now(timezone.utc)
    doc["created_at"] = now
    doc["updated_at"] = now
    result = db[collection_name].insert_one(doc)
    return str(result.inserted_id)
