import pytest
from bson import ObjectId

from conftest import stored_positions
from ideahive.application.content import get_page_content, replace_page_content
from ideahive.documents import block_store, page_content
from ideahive.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError


def test_page_without_content_reads_as_empty(world):
    record, blocks = get_page_content(actor_id=world.viewer, page_id=world.private_page)

    assert record is None
    assert blocks == []


def test_read_returns_blocks_in_content_order(world, seed):
    a, b, c = seed(3)

    record, blocks = get_page_content(actor_id=world.viewer, page_id=world.private_page)

    assert record["version"] == 3
    assert [block["_id"] for block in blocks] == [a, b, c]


def test_read_skips_dangling_ids(world, seed):
    a, b = seed(2)
    block_store.delete_many([a])

    _, blocks = get_page_content(actor_id=world.viewer, page_id=world.private_page)

    assert [block["_id"] for block in blocks] == [b]


def test_public_page_is_readable_by_anyone(world):
    record, blocks = get_page_content(actor_id=world.outsider, page_id=world.public_page)
    assert record is None and blocks == []

    record, blocks = get_page_content(actor_id=None, page_id=world.public_page)
    assert record is None


def test_private_page_needs_membership(world):
    with pytest.raises(ForbiddenError):
        get_page_content(actor_id=world.outsider, page_id=world.private_page)
    with pytest.raises(NotFoundError):
        get_page_content(actor_id=world.owner, page_id="nope")


def test_replace_updates_inserts_reorders_and_deletes(world, seed):
    a, b, c = seed(3)

    result = replace_page_content(
        actor_id=world.member,
        page_id=world.private_page,
        blocks=[
            {"id": str(c), "content": "third first"},
            {"type": "quote", "content": "new"},
            {"id": str(a)},
        ],
    )

    new_id = result["blocks"][1]["_id"]
    assert result["version"] == 4
    assert page_content.get(world.private_page)["blocks"] == [c, new_id, a]
    assert stored_positions(world.private_page) == [(c, 0), (new_id, 1), (a, 2)]
    assert block_store.get(b) is None
    assert block_store.get(c)["content"] == "third first"
    assert block_store.get(a)["content"] == "block 0"
    assert block_store.get(new_id)["type"] == "quote"


def test_replace_treats_foreign_ids_as_new_blocks(world, seed):
    (foreign,) = seed(1, page_id=world.foreign_page, actor_id=world.other)

    result = replace_page_content(
        actor_id=world.member,
        page_id=world.private_page,
        blocks=[{"id": str(foreign), "type": "text", "content": "copy"}],
    )

    (created,) = result["blocks"]
    assert created["_id"] != foreign
    assert created["page_id"] == world.private_page
    assert block_store.get(foreign)["page_id"] == world.foreign_page


def test_replace_rejects_duplicate_ids(world, seed):
    (a,) = seed(1)

    with pytest.raises(BadRequestError, match="more than once"):
        replace_page_content(
            actor_id=world.member,
            page_id=world.private_page,
            blocks=[{"id": str(a)}, {"id": str(a)}],
        )
    assert page_content.get(world.private_page)["version"] == 1


@pytest.mark.parametrize("blocks", [None, {"id": "x"}, ["text"], [{"content": "no type"}]])
def test_replace_rejects_malformed_payloads(world, blocks):
    with pytest.raises(BadRequestError):
        replace_page_content(actor_id=world.member, page_id=world.private_page, blocks=blocks)
    assert page_content.get(world.private_page) is None


def test_replace_with_empty_list_clears_the_page(world, seed):
    a, b = seed(2)

    result = replace_page_content(actor_id=world.member, page_id=world.private_page, blocks=[])

    assert result["version"] == 3
    assert page_content.get(world.private_page)["blocks"] == []
    assert block_store.list_for_page(world.private_page) == []


def test_edits_refuse_content_listing_unresolved_blocks(world, seed):
    a, b = seed(2)
    block_store.delete_many([a])

    with pytest.raises(ConflictError):
        replace_page_content(actor_id=world.member, page_id=world.private_page, blocks=[{"id": str(b)}])
    assert page_content.get(world.private_page)["version"] == 2


def test_replace_requires_edit_rights(world):
    with pytest.raises(ForbiddenError):
        replace_page_content(actor_id=world.viewer, page_id=world.private_page, blocks=[])


def test_unknown_ids_in_replace_become_new_blocks(world):
    missing = ObjectId()

    result = replace_page_content(
        actor_id=world.member,
        page_id=world.private_page,
        blocks=[{"id": str(missing), "type": "text"}],
    )

    assert result["blocks"][0]["_id"] != missing
