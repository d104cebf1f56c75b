from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING

from .collections import PAGE_HISTORY, get_col


def archive(
    *,
    page_id: str,
    version: int,
    content: List[Dict[str, Any]],
    edited_by: str,
    edited_at: datetime,
) -> None:
    """
    Record what `version` of a page contained, exactly once.

    Entries are append-only: if an entry for (page_id, version) already
    exists it is left untouched.
    """
    get_col(PAGE_HISTORY).update_one(
        {"page_id": page_id, "version": version},
        {
            "$setOnInsert": {
                "page_id": page_id,
                "version": version,
                "content": content,
                "edited_by": edited_by,
                "edited_at": edited_at,
            }
        },
        upsert=True,
    )


def list_for_page(page_id: str) -> List[Dict[str, Any]]:
    return list(
        get_col(PAGE_HISTORY)
        .find({"page_id": page_id})
        .sort("version", DESCENDING)
    )


def get(page_id: str, version: int) -> Optional[Dict[str, Any]]:
    return get_col(PAGE_HISTORY).find_one({"page_id": page_id, "version": version})
