from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .collections import TEMPLATES, get_col


def get_content(template_id: str) -> Optional[List[Dict[str, Any]]]:
    doc = get_col(TEMPLATES).find_one({"_id": template_id})
    if not doc or not isinstance(doc.get("content"), list):
        return None
    return doc["content"]


def put_content(template_id: str, content: List[Dict[str, Any]]) -> None:
    get_col(TEMPLATES).replace_one(
        {"_id": template_id},
        {
            "_id": template_id,
            "content": content,
            "updated_at": datetime.now(timezone.utc),
        },
        upsert=True,
    )
