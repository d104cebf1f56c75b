"""
Reading and restoring archived page versions.
"""
from typing import Any, Dict, Iterable, List, Optional

from ideahive.documents import history
from ideahive.errors import NotFoundError
from ideahive.models.user import User
from ideahive.normalizers.block import normalize_block
from ideahive.normalizers.history import normalize_history_entry, normalize_page_version
from ideahive.services.permissions import require_page_edit, require_page_read
from ideahive.utils.versioning import is_legacy_snapshot
from .protocol import page_mutation, resolve_blocks


def _editors(user_ids: Iterable[str]) -> Dict[str, User]:
    ids = {user_id for user_id in user_ids if user_id}
    if not ids:
        return {}
    return {user.id: user for user in User.query.filter(User.id.in_(ids)).all()}


def snapshot_to_blocks(page_id: str, content) -> List[Dict[str, Any]]:
    """
    Blocks recorded by a history entry, in recorded order.
    Id-only entries are looked up in the live store and may come back shorter.
    """
    if is_legacy_snapshot(content):
        return resolve_blocks(page_id, content)
    return [dict(item) for item in content or []]


def get_page_history(*, actor_id: Optional[str], page_id: str) -> List[Dict[str, Any]]:
    require_page_read(page_id, actor_id)

    entries = history.list_for_page(page_id)
    editors = _editors(entry.get("edited_by") for entry in entries)

    return [
        normalize_history_entry(entry, editors.get(entry.get("edited_by")))
        for entry in entries
    ]


def get_page_version(*, actor_id: Optional[str], page_id: str, version: int) -> Dict[str, Any]:
    require_page_read(page_id, actor_id)

    entry = history.get(page_id, version)
    if not entry:
        raise NotFoundError("Version not found")

    editor = _editors([entry.get("edited_by")]).get(entry.get("edited_by"))
    return normalize_page_version(entry, snapshot_to_blocks(page_id, entry.get("content")), editor)


def restore_page_version(
    *,
    actor_id: str,
    page_id: str,
    version: int,
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """
    Bring back the blocks of an archived version as a new version.

    Responsibilities:
    - archive the current content before overwriting it
    - rewrite surviving blocks and re-create deleted ones under their old ids
    - delete current blocks the archived version did not have
    - never rewind or truncate history
    """
    require_page_edit(page_id, actor_id)

    entry = history.get(page_id, version)
    if not entry:
        raise NotFoundError("Version not found")

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        if mutation.content is None:
            raise NotFoundError("Page has no current content")

        mutation.restore(snapshot_to_blocks(page_id, entry.get("content")))
        mutation.renumber()
        mutation.emit(
            "versionRestored",
            restored_from=version,
            blocks=[normalize_block(block) for block in mutation.blocks],
        )

    return {
        "page_id": page_id,
        "version": mutation.committed_version,
        "restored_from": version,
        "blocks": mutation.blocks,
    }
