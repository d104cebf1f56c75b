from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from ideahive.errors import ConflictError
from .collections import PAGE_CONTENTS, get_col


def get(page_id: str) -> Optional[Dict[str, Any]]:
    return get_col(PAGE_CONTENTS).find_one({"page_id": page_id})


def save(
    *,
    page_id: str,
    blocks: List[ObjectId],
    expected_version: int,
    edited_by: str,
    edited_at: datetime,
) -> int:
    """
    Conditionally write the ordered block list as version expected_version + 1.

    expected_version == 0 means "no content yet": the record is created and
    the unique page_id index rejects a concurrent creator. Otherwise the
    update only matches while the stored version is still expected_version.
    Raises ConflictError when another writer got there first.
    """
    new_version = expected_version + 1
    fields = {
        "blocks": list(blocks),
        "version": new_version,
        "last_edited_by": edited_by,
        "last_edited_at": edited_at,
    }

    if expected_version == 0:
        try:
            get_col(PAGE_CONTENTS).insert_one({"page_id": page_id, **fields})
        except DuplicateKeyError as exc:
            raise ConflictError(
                "Page content was created concurrently; reload and retry"
            ) from exc
        return new_version

    result = get_col(PAGE_CONTENTS).update_one(
        {"page_id": page_id, "version": expected_version},
        {"$set": fields},
    )
    if result.matched_count == 0:
        raise ConflictError(
            f"Page content changed since version {expected_version}; reload and retry"
        )
    return new_version
