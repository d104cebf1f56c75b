from typing import Any, Dict, Optional

from .block import normalize_block, _iso, _ref


def normalize_editor(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "full_name": user.full_name,
        "avatar_url": user.avatar_url,
    }


def normalize_snapshot_item(item):
    # Older entries hold bare block ids
    if isinstance(item, dict):
        return normalize_block(item)
    return _ref(item)


def normalize_history_entry(entry, editor=None) -> Dict[str, Any]:
    content = entry.get("content") or []
    return {
        "page_id": entry["page_id"],
        "version": entry["version"],
        "content": [normalize_snapshot_item(item) for item in content],
        "block_count": len(content),
        "edited_by": entry.get("edited_by"),
        "edited_at": _iso(entry.get("edited_at")),
        "editor": normalize_editor(editor),
    }


def normalize_page_version(entry, blocks, editor=None) -> Dict[str, Any]:
    return {
        "page_id": entry["page_id"],
        "version": entry["version"],
        "blocks": [normalize_block(b) for b in blocks],
        "edited_by": entry.get("edited_by"),
        "edited_at": _iso(entry.get("edited_at")),
        "editor": normalize_editor(editor),
    }
