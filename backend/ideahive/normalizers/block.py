from datetime import datetime, timezone
from bson import ObjectId

def _iso(value):
    if not isinstance(value, datetime):
        return value
    # Stored timestamps are UTC; some drivers hand them back naive
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()

def _ref(value):
    return str(value) if isinstance(value, ObjectId) else value

def normalize_block(block):
    return {
        "id": str(block["_id"]),
        "page_id": block.get("page_id"),
        "type": block.get("type"),
        "content": block.get("content"),
        "properties": block.get("properties") or {},
        "children": [_ref(child) for child in block.get("children") or []],
        "position": block.get("position"),
        "created_by": block.get("created_by"),
        "created_at": _iso(block.get("created_at")),
        "updated_at": _iso(block.get("updated_at")),
    }
