from typing import Any, Dict, List, Optional

from ideahive.documents import page_content
from ideahive.documents.collections import to_object_id
from ideahive.errors import BadRequestError
from ideahive.normalizers.block import normalize_block
from ideahive.services.permissions import require_page_edit, require_page_read
from .protocol import page_mutation, resolve_blocks
from .validation import block_fields, require_block_type


def get_page_content(*, actor_id: Optional[str], page_id: str):
    """Returns (content record or None, resolved blocks in display order)."""
    require_page_read(page_id, actor_id)

    content = page_content.get(page_id)
    if content is None:
        return None, []
    return content, resolve_blocks(page_id, content.get("blocks") or [])


def replace_page_content(
    *,
    actor_id: str,
    page_id: str,
    blocks: List[Dict[str, Any]],
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """
    Full-document save.

    Edge cases handled:
    - Items carrying the id of one of the page's blocks update it in place
    - Items without an id, or with an id from elsewhere, become new blocks
    - The same id twice in one payload is rejected
    - Page blocks missing from the payload are deleted
    """
    if not isinstance(blocks, list):
        raise BadRequestError("blocks must be an array")

    for index, item in enumerate(blocks):
        if not isinstance(item, dict):
            raise BadRequestError(f"blocks[{index}] must be an object")

    require_page_edit(page_id, actor_id)

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        order = []
        seen = set()

        for index, item in enumerate(blocks):
            label = f"blocks[{index}]"
            fields = block_fields(item, label=label)

            raw_id = item.get("id", item.get("_id"))
            block_id = to_object_id(raw_id) if raw_id is not None else None

            if block_id is not None and mutation.contains(block_id):
                if block_id in seen:
                    raise BadRequestError(f"{label}: block {block_id} appears more than once")
                seen.add(block_id)
                if fields:
                    mutation.update(block_id, fields)
                order.append(block_id)
                continue

            block = mutation.insert(
                block_type=require_block_type(item.get("type"), f"{label}.type"),
                content=fields.get("content"),
                properties=fields.get("properties"),
                children=fields.get("children"),
            )
            order.append(block["_id"])

        mutation.arrange(order)
        mutation.renumber()
        mutation.emit(
            "contentReplaced",
            blocks=[normalize_block(block) for block in mutation.blocks],
        )

    return {
        "page_id": page_id,
        "version": mutation.committed_version,
        "blocks": mutation.blocks,
    }
