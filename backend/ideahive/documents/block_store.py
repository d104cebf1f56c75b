from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, UpdateOne

from ideahive.errors import NotFoundError
from .collections import BLOCKS, get_col, to_object_id

# Fields a caller may change through a partial update
MUTABLE_BLOCK_FIELDS = ("type", "content", "properties", "children")

# Page content version whose ordering last set a block's position
POSITION_VERSION = "position_version"


def new_block_id() -> ObjectId:
    return ObjectId()


def build_block(
    *,
    page_id: str,
    block_type: str,
    created_by: str,
    content: Any = None,
    properties: Optional[dict] = None,
    children: Optional[list] = None,
    position: int = 0,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Shape a new block document; the id is assigned here, not by the store."""
    now = now or datetime.now(timezone.utc)
    return {
        "_id": new_block_id(),
        "page_id": page_id,
        "type": block_type,
        "content": content if content is not None else "",
        "properties": dict(properties or {}),
        "children": list(children or []),
        "position": position,
        "created_by": created_by,
        "created_at": now,
        "updated_at": now,
    }


def get(block_id) -> Optional[Dict[str, Any]]:
    return get_col(BLOCKS).find_one({"_id": to_object_id(block_id)})


def require(block_id) -> Dict[str, Any]:
    block = get(block_id)
    if not block:
        raise NotFoundError("Block not found")
    return block


def find_many(block_ids: Iterable) -> Dict[ObjectId, Dict[str, Any]]:
    ids = [oid for oid in (to_object_id(b) for b in block_ids) if oid is not None]
    if not ids:
        return {}
    return {doc["_id"]: doc for doc in get_col(BLOCKS).find({"_id": {"$in": ids}})}


def list_for_page(page_id: str) -> List[Dict[str, Any]]:
    return list(
        get_col(BLOCKS)
        .find({"page_id": page_id})
        .sort("position", ASCENDING)
    )


def insert_many(blocks: List[Dict[str, Any]]) -> List[ObjectId]:
    if not blocks:
        return []
    for block in blocks:
        block.setdefault("_id", new_block_id())
    get_col(BLOCKS).insert_many(blocks)
    return [block["_id"] for block in blocks]


def create_missing(blocks: List[Dict[str, Any]]) -> List[ObjectId]:
    """
    Create each block whose id is not stored yet; existing documents are
    left as they are. Returns the ids that were actually created.
    """
    created = []
    for block in blocks:
        fields = {key: value for key, value in block.items() if key != "_id"}
        result = get_col(BLOCKS).update_one(
            {"_id": block["_id"]},
            {"$setOnInsert": fields},
            upsert=True,
        )
        if result.upserted_id is not None:
            created.append(result.upserted_id)
    return created


def apply_changes(changes: List[Tuple[ObjectId, Dict[str, Any]]]) -> None:
    """Bulk `$set` of field changes, each stamped with updated_at."""
    if not changes:
        return
    now = datetime.now(timezone.utc)
    get_col(BLOCKS).bulk_write(
        [
            UpdateOne({"_id": block_id}, {"$set": {**fields, "updated_at": now}})
            for block_id, fields in changes
        ],
        ordered=False,
    )


def delete_many(block_ids: Iterable) -> int:
    ids = [oid for oid in (to_object_id(b) for b in block_ids) if oid is not None]
    if not ids:
        return 0
    return get_col(BLOCKS).delete_many({"_id": {"$in": ids}}).deleted_count


def reassign_positions(page_id: str, moves: List[Tuple[ObjectId, int]], *, version: int) -> None:
    """
    Bulk rewrite of `position` for blocks of one page, as numbered by page
    content `version`. A block already positioned by a later version is
    skipped, so a slow writer cannot undo a newer ordering.
    """
    if not moves:
        return
    get_col(BLOCKS).bulk_write(
        [
            UpdateOne(
                {
                    "_id": block_id,
                    "page_id": page_id,
                    "$or": [
                        {POSITION_VERSION: {"$lt": version}},
                        {POSITION_VERSION: {"$exists": False}},
                    ],
                },
                {"$set": {"position": position, POSITION_VERSION: version}},
            )
            for block_id, position in moves
        ],
        ordered=False,
    )
