"""
Single-block use cases: create, read, update, delete, move, duplicate.
Each mutating call bumps the owning page's content version by one.
"""
import copy
from typing import Any, Dict, Optional

from ideahive.documents import block_store
from ideahive.errors import BadRequestError
from ideahive.normalizers.block import normalize_block
from ideahive.services.permissions import require_page_edit, require_page_read
from .protocol import page_mutation
from .validation import block_fields, require_block_type, require_position


def create_block(
    *,
    actor_id: str,
    page_id: str,
    block_type: str,
    content: Any = None,
    position: Optional[int] = None,
    properties: Optional[dict] = None,
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """
    Insert a block at `position`, shifting later siblings down by one,
    or append it when no position (or one past the end) is given.
    """
    require_block_type(block_type)
    if position is not None:
        require_position(position)
    if properties is not None and not isinstance(properties, dict):
        raise BadRequestError("properties must be an object")

    require_page_edit(page_id, actor_id)

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        block = mutation.insert(
            block_type=block_type,
            content=content,
            properties=properties,
            index=position,
        )
        mutation.emit("blockAdded", block=normalize_block(block))

    return {"block": block, "version": mutation.committed_version}


def get_block(*, actor_id: Optional[str], block_id) -> Dict[str, Any]:
    block = block_store.require(block_id)
    require_page_read(block["page_id"], actor_id)
    return block


def update_block(
    *,
    actor_id: str,
    block_id,
    data: Dict[str, Any],
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """
    Merge type/content/properties/children into a block in place.
    A `position` in the same payload moves the block within this version.
    """
    fields = block_fields(data)
    position = data.get("position")
    if position is not None:
        require_position(position)

    if not fields and position is None:
        raise BadRequestError("No valid fields provided for update")

    current = block_store.require(block_id)
    page_id = current["page_id"]
    require_page_edit(page_id, actor_id)

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        block = mutation.update(block_id, fields) if fields else mutation.get(block_id)

        if position is not None:
            if position >= len(mutation.blocks):
                raise BadRequestError("Invalid position")
            mutation.move(block_id, position)

        mutation.emit("blockUpdated", block_id=str(block_id), fields=sorted(fields))

    return {"block": block, "version": mutation.committed_version}


def delete_block(
    *,
    actor_id: str,
    block_id,
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    current = block_store.require(block_id)
    page_id = current["page_id"]
    require_page_edit(page_id, actor_id)

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        mutation.remove(block_id)
        mutation.emit("blockDeleted", block_id=str(block_id))

    return {
        "block_id": block_id,
        "page_id": page_id,
        "version": mutation.committed_version,
    }


def update_block_position(
    *,
    actor_id: str,
    block_id,
    position,
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """
    Move a block to `position` and renumber its siblings 0..n-1.
    Moving a block onto its own position writes nothing.
    """
    require_position(position)

    current = block_store.require(block_id)
    page_id = current["page_id"]
    require_page_edit(page_id, actor_id)

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        if position >= len(mutation.blocks):
            raise BadRequestError("Invalid position")

        if mutation.index_of(block_id) == position:
            mutation.discard()
        else:
            mutation.move(block_id, position)
            mutation.emit("blockMoved", block_id=str(block_id), position=position)

    if mutation.discarded:
        return {
            "block": mutation.get(block_id),
            "version": mutation.version,
            "unchanged": True,
        }

    return {
        "block": mutation.get(block_id),
        "version": mutation.committed_version,
        "unchanged": False,
    }


def duplicate_block(
    *,
    actor_id: str,
    block_id,
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """Clone a block directly after the original."""
    current = block_store.require(block_id)
    page_id = current["page_id"]
    require_page_edit(page_id, actor_id)

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        original = mutation.get(block_id)
        clone = mutation.insert(
            block_type=original["type"],
            content=copy.deepcopy(original.get("content")),
            properties=copy.deepcopy(original.get("properties")),
            children=copy.deepcopy(original.get("children")),
            index=mutation.index_of(block_id) + 1,
        )
        mutation.emit(
            "blockAdded",
            block=normalize_block(clone),
            duplicated_from=str(block_id),
        )

    return {"block": clone, "version": mutation.committed_version}
