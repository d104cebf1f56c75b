"""
Versioned mutation protocol shared by every page-content use case.

A mutation runs inside `page_mutation(...)`:

1. The page's current PageContent and its blocks are read (a page without
   content counts as version 0 with no blocks). An id in the content list
   that no longer resolves is a conflict, not something to drop silently.
2. The use case edits an in-memory working copy of the ordered block list.
3. On exit the working copy is committed:
   - new (and re-created) block documents are staged; nothing references
     them until the swap below lands
   - PageContent is compare-and-swapped from N to N + 1; a losing writer
     removes what it staged and gets a ConflictError
   - the superseded version N is archived to history
   - field updates, position rewrites and deletions follow; position
     writes carry N + 1 and never overwrite a later version's ordering
   - pages.updated_at is touched (best effort)
   - edit notifications go out to the page room (best effort)

Nothing is written when the body raises or calls `discard()`.
"""
import copy
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId

from ideahive.documents import block_store, history, page_content
from ideahive.documents.collections import to_object_id
from ideahive.domain.invariants.block import (
    assert_block_positions,
    assert_single_page,
    assert_unique_ids,
)
from ideahive.errors import ConflictError, NotFoundError
from ideahive.realtime.broadcaster import get_broadcaster
from ideahive.services.permissions import touch_page_timestamp
from ideahive.utils.locks import page_lock
from ideahive.utils.optimistic_lock import enforce_preconditions
from ideahive.utils.order import clamp_insert_index, move_item, renumber
from ideahive.utils.versioning import snapshot_blocks

logger = logging.getLogger(__name__)

# Fields a restore writes back onto a block that still exists
RESTORED_FIELDS = ("type", "content", "properties", "children", "created_by", "created_at")


def resolve_blocks(page_id: str, block_ids: Iterable, *, strict: bool = False) -> List[Dict[str, Any]]:
    """
    Fetch blocks in the given order, skipping ids that belong to another page.

    Ids that do not resolve are skipped too, unless `strict` is set: then
    they raise ConflictError, since the list may be ahead of the block
    writes of a commit still in progress elsewhere.
    """
    ordered_ids = []
    for raw in block_ids:
        block_id = to_object_id(raw)
        if block_id is not None and block_id not in ordered_ids:
            ordered_ids.append(block_id)

    found = block_store.find_many(ordered_ids)

    missing = [block_id for block_id in ordered_ids if block_id not in found]
    if strict and missing:
        logger.warning(
            "Page %s content lists unresolved blocks %s",
            page_id, [str(block_id) for block_id in missing],
        )
        raise ConflictError("Page content is being written by another editor; reload and retry")

    return [
        found[block_id]
        for block_id in ordered_ids
        if block_id in found and found[block_id].get("page_id") == page_id
    ]


class PageMutation:
    """Working copy of one page's ordered blocks plus the pending writes."""

    def __init__(self, *, page_id: str, actor_id: str, content, blocks):
        self.page_id = page_id
        self.actor_id = actor_id
        self.content = content
        self.version: int = content["version"] if content else 0
        self.now = datetime.now(timezone.utc)

        self.original = blocks
        self.blocks = [copy.deepcopy(block) for block in blocks]

        self._inserted: set = set()
        self._restored: set = set()
        self._changed: Dict[ObjectId, Dict[str, Any]] = {}

        self.events: List[tuple] = []
        self.discarded = False
        self.committed_version: Optional[int] = None

    # -------------------------------------------------
    # Reads
    # -------------------------------------------------
    @property
    def block_ids(self) -> List[ObjectId]:
        return [block["_id"] for block in self.blocks]

    def contains(self, block_id) -> bool:
        return any(block["_id"] == block_id for block in self.blocks)

    def index_of(self, block_id) -> int:
        for index, block in enumerate(self.blocks):
            if block["_id"] == block_id:
                return index
        raise NotFoundError("Block is not part of this page's content")

    def get(self, block_id) -> Dict[str, Any]:
        return self.blocks[self.index_of(block_id)]

    # -------------------------------------------------
    # Edits
    # -------------------------------------------------
    def insert(
        self,
        *,
        block_type: str,
        content: Any = None,
        properties: Optional[dict] = None,
        children: Optional[list] = None,
        index: Optional[int] = None,
    ) -> Dict[str, Any]:
        index = clamp_insert_index(index, len(self.blocks))
        block = block_store.build_block(
            page_id=self.page_id,
            block_type=block_type,
            created_by=self.actor_id,
            content=content,
            properties=properties,
            children=children,
            position=index,
            now=self.now,
        )
        self.blocks.insert(index, block)
        self._inserted.add(block["_id"])
        return block

    def update(self, block_id, fields: Dict[str, Any]) -> Dict[str, Any]:
        block = self.get(block_id)
        block.update(copy.deepcopy(fields))
        block["updated_at"] = self.now

        if block_id not in self._inserted and block_id not in self._restored:
            self._changed.setdefault(block_id, {}).update(copy.deepcopy(fields))
        return block

    def remove(self, block_id) -> Dict[str, Any]:
        block = self.blocks.pop(self.index_of(block_id))
        self._forget(block_id)
        return block

    def move(self, block_id, index: int) -> None:
        move_item(self.blocks, self.index_of(block_id), index)

    def arrange(self, block_ids: List[ObjectId]) -> None:
        """Reorder to `block_ids`; blocks left out are removed."""
        by_id = {block["_id"]: block for block in self.blocks}
        for block_id in set(by_id) - set(block_ids):
            self._forget(block_id)
        self.blocks = [by_id[block_id] for block_id in block_ids]

    def clear(self) -> None:
        for block in self.blocks:
            self._forget(block["_id"])
        self.blocks = []

    def restore(self, blocks: List[Dict[str, Any]]) -> None:
        """Replace the page with whole archived blocks, keeping their ids."""
        self.clear()
        for archived in blocks:
            block = copy.deepcopy(archived)
            block["page_id"] = self.page_id
            block["updated_at"] = self.now
            block.setdefault("properties", {})
            block.setdefault("children", [])
            self.blocks.append(block)
            self._restored.add(block["_id"])

    def renumber(self) -> List[Dict[str, Any]]:
        """Align every working block's position with its list index."""
        return renumber(self.blocks)

    def emit(self, event: str, **payload) -> None:
        self.events.append((event, payload))

    def discard(self) -> None:
        self.discarded = True

    def _forget(self, block_id) -> None:
        self._inserted.discard(block_id)
        self._restored.discard(block_id)
        self._changed.pop(block_id, None)

    # -------------------------------------------------
    # Commit
    # -------------------------------------------------
    def commit(self) -> int:
        self.renumber()

        assert_unique_ids(self.blocks)
        assert_single_page(self.blocks, self.page_id)
        assert_block_positions(self.blocks)

        new_version = self.version + 1
        final_ids = set(self.block_ids)
        removed = [
            block["_id"] for block in self.original
            if block["_id"] not in final_ids
        ]
        inserted = [block for block in self.blocks if block["_id"] in self._inserted]
        restored = [block for block in self.blocks if block["_id"] in self._restored]
        for block in inserted + restored:
            block[block_store.POSITION_VERSION] = new_version

        # 1️⃣ Stage block documents the new list will reference
        staged = block_store.insert_many(inserted)
        staged += block_store.create_missing(restored)

        # 2️⃣ Claim the next version; a concurrent writer fails here
        try:
            page_content.save(
                page_id=self.page_id,
                blocks=self.block_ids,
                expected_version=self.version,
                edited_by=self.actor_id,
                edited_at=self.now,
            )
        except ConflictError:
            block_store.delete_many(staged)
            raise

        self.committed_version = new_version

        # 3️⃣ Archive the version this commit superseded
        if self.content is not None:
            history.archive(
                page_id=self.page_id,
                version=self.version,
                content=snapshot_blocks(self.original),
                edited_by=self.actor_id,
                edited_at=self.now,
            )

        # 4️⃣ Block writes
        changes = [
            (block["_id"], {field: block[field] for field in RESTORED_FIELDS if field in block})
            for block in restored
            if block["_id"] not in staged
        ]
        changes += list(self._changed.items())
        block_store.apply_changes(changes)
        block_store.reassign_positions(
            self.page_id,
            [
                (block["_id"], block["position"])
                for block in self.blocks
                if block["_id"] not in staged
            ],
            version=new_version,
        )
        block_store.delete_many(
            [block_id for block_id in removed if block_id not in self._restored]
        )

        logger.info(
            "Page %s content committed at version %s by %s (%s)",
            self.page_id, new_version, self.actor_id,
            ", ".join(event for event, _ in self.events) or "edit",
        )

        # 5️⃣ Relational side effect, after the document commit
        touch_page_timestamp(self.page_id)

        # 6️⃣ Live notifications
        broadcaster = get_broadcaster()
        for event, payload in self.events:
            broadcaster.publish(
                self.page_id,
                event,
                {"page_id": self.page_id, "version": new_version, **payload},
            )

        return new_version


@contextmanager
def page_mutation(
    page_id: str,
    *,
    actor_id: str,
    expected_version: Optional[int] = None,
    unmodified_since: Optional[datetime] = None,
):
    """
    Serialize, load, yield a PageMutation, then commit it.

    expected_version / unmodified_since are client preconditions
    (If-Match / If-Unmodified-Since); a mismatch raises ConflictError
    before anything is written.
    """
    with page_lock(page_id):
        content = page_content.get(page_id)
        enforce_preconditions(
            current_version=content["version"] if content else 0,
            last_edited_at=content.get("last_edited_at") if content else None,
            expected_version=expected_version,
            unmodified_since=unmodified_since,
        )

        mutation = PageMutation(
            page_id=page_id,
            actor_id=actor_id,
            content=content,
            blocks=resolve_blocks(page_id, content["blocks"], strict=True) if content else [],
        )

        yield mutation

        if not mutation.discarded:
            mutation.commit()
