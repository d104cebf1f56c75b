from bson import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database

from ideahive.errors import BadRequestError

BLOCKS = "blocks"
PAGE_CONTENTS = "page_contents"
PAGE_HISTORY = "page_history"
TEMPLATES = "templates"


def get_db() -> Database:
    return current_app.extensions["mongo"].db


def get_col(name: str):
    return get_db()[name]


def ensure_indexes(db: Database) -> None:
    db[PAGE_CONTENTS].create_index("page_id", unique=True)
    db[PAGE_HISTORY].create_index(
        [("page_id", ASCENDING), ("version", DESCENDING)],
        unique=True,
    )
    db[BLOCKS].create_index([("page_id", ASCENDING), ("position", ASCENDING)])


def parse_object_id(raw, *, label: str = "id") -> ObjectId:
    """
    Coerce a route/body value into an ObjectId.
    Raises BadRequestError for anything that is not a 24-char hex id.
    """
    if isinstance(raw, ObjectId):
        return raw
    try:
        return ObjectId(str(raw))
    except (InvalidId, TypeError) as exc:
        raise BadRequestError(f"Invalid {label}: {raw!r}") from exc


def to_object_id(raw):
    """Lenient variant used when reading stored references."""
    if isinstance(raw, ObjectId):
        return raw
    if isinstance(raw, dict) and "_id" in raw:
        return to_object_id(raw["_id"])
    try:
        return ObjectId(str(raw))
    except (InvalidId, TypeError):
        return None
