import pytest
from bson import ObjectId

from conftest import stored_positions
from ideahive.application.content import (
    create_block,
    delete_block,
    duplicate_block,
    get_block,
    update_block,
    update_block_position,
)
from ideahive.documents import block_store, history, page_content
from ideahive.errors import BadRequestError, ForbiddenError, NotFoundError


def _ordered_ids(page_id="page-private"):
    return page_content.get(page_id)["blocks"]


def test_first_block_creates_page_content_at_version_one(world):
    result = create_block(
        actor_id=world.member,
        page_id=world.private_page,
        block_type="text",
        content="hello",
        position=0,
    )

    content = page_content.get(world.private_page)
    assert result["version"] == 1
    assert content["version"] == 1
    assert content["blocks"] == [result["block"]["_id"]]
    assert content["last_edited_by"] == world.member
    assert block_store.get(result["block"]["_id"])["position"] == 0
    assert history.list_for_page(world.private_page) == []


def test_create_inserts_and_shifts_later_blocks(world, seed):
    first, second, third = seed(3)

    result = create_block(
        actor_id=world.member,
        page_id=world.private_page,
        block_type="heading",
        content="Title",
        position=1,
    )

    new_id = result["block"]["_id"]
    assert _ordered_ids() == [first, new_id, second, third]
    assert stored_positions(world.private_page) == [
        (first, 0), (new_id, 1), (second, 2), (third, 3),
    ]
    assert result["version"] == 4


def test_create_past_the_end_appends(world, seed):
    first, second = seed(2)

    result = create_block(
        actor_id=world.member,
        page_id=world.private_page,
        block_type="text",
        position=10,
    )

    assert _ordered_ids() == [first, second, result["block"]["_id"]]
    assert block_store.get(result["block"]["_id"])["position"] == 2


def test_create_defaults_content_properties_and_children(world):
    result = create_block(actor_id=world.member, page_id=world.private_page, block_type="divider")

    stored = block_store.get(result["block"]["_id"])
    assert stored["content"] == ""
    assert stored["properties"] == {}
    assert stored["children"] == []
    assert stored["created_by"] == world.member


@pytest.mark.parametrize("block_type", [None, "", "   ", 5])
def test_create_rejects_missing_type(world, block_type):
    with pytest.raises(BadRequestError):
        create_block(actor_id=world.member, page_id=world.private_page, block_type=block_type)
    assert page_content.get(world.private_page) is None


@pytest.mark.parametrize("position", [-1, "1", True, 1.5])
def test_create_rejects_bad_position(world, position):
    with pytest.raises(BadRequestError):
        create_block(
            actor_id=world.member,
            page_id=world.private_page,
            block_type="text",
            position=position,
        )


def test_viewer_cannot_create(world):
    with pytest.raises(ForbiddenError):
        create_block(actor_id=world.viewer, page_id=world.private_page, block_type="text")


def test_create_on_unknown_page(world):
    with pytest.raises(NotFoundError):
        create_block(actor_id=world.member, page_id="missing", block_type="text")


def test_get_block_checks_read_access(world, seed):
    (block_id,) = seed(1)

    assert get_block(actor_id=world.viewer, block_id=block_id)["_id"] == block_id
    with pytest.raises(ForbiddenError):
        get_block(actor_id=world.outsider, block_id=block_id)
    with pytest.raises(NotFoundError):
        get_block(actor_id=world.viewer, block_id=ObjectId())


def test_update_merges_fields_and_bumps_version(world, seed):
    (block_id,) = seed(1)

    result = update_block(
        actor_id=world.admin,
        block_id=block_id,
        data={"content": "changed", "properties": {"level": 2}, "bogus": 1},
    )

    stored = block_store.get(block_id)
    assert result["version"] == 2
    assert stored["content"] == "changed"
    assert stored["properties"] == {"level": 2}
    assert stored["type"] == "text"
    assert "bogus" not in stored
    assert page_content.get(world.private_page)["last_edited_by"] == world.admin


def test_update_without_known_fields_is_rejected(world, seed):
    (block_id,) = seed(1)

    with pytest.raises(BadRequestError, match="No valid fields"):
        update_block(actor_id=world.member, block_id=block_id, data={"bogus": 1})
    assert page_content.get(world.private_page)["version"] == 1


def test_update_with_position_moves_in_the_same_version(world, seed):
    first, second, third = seed(3)

    result = update_block(
        actor_id=world.member,
        block_id=third,
        data={"content": "moved", "position": 0},
    )

    assert result["version"] == 4
    assert _ordered_ids() == [third, first, second]
    assert stored_positions(world.private_page) == [(third, 0), (first, 1), (second, 2)]
    assert block_store.get(third)["content"] == "moved"


def test_delete_closes_the_gap(world, seed):
    first, second, third = seed(3)

    result = delete_block(actor_id=world.member, block_id=second)

    assert result["version"] == 4
    assert block_store.get(second) is None
    assert _ordered_ids() == [first, third]
    assert stored_positions(world.private_page) == [(first, 0), (third, 1)]

    archived = history.get(world.private_page, 3)
    assert [item["_id"] for item in archived["content"]] == [first, second, third]


def test_delete_unknown_block(world):
    with pytest.raises(NotFoundError):
        delete_block(actor_id=world.member, block_id=ObjectId())


def test_move_renumbers_siblings(world, seed):
    a, b, c, d = seed(4)

    result = update_block_position(actor_id=world.member, block_id=a, position=2)

    assert result["unchanged"] is False
    assert result["version"] == 5
    assert _ordered_ids() == [b, c, a, d]
    assert stored_positions(world.private_page) == [(b, 0), (c, 1), (a, 2), (d, 3)]


def test_move_to_current_position_is_unchanged(world, seed):
    first, second = seed(2)

    result = update_block_position(actor_id=world.member, block_id=second, position=1)

    assert result["unchanged"] is True
    assert result["version"] == 2
    assert page_content.get(world.private_page)["version"] == 2
    assert history.get(world.private_page, 2) is None


def test_move_out_of_range(world, seed):
    first, second = seed(2)

    with pytest.raises(BadRequestError, match="Invalid position"):
        update_block_position(actor_id=world.member, block_id=first, position=2)
    assert page_content.get(world.private_page)["version"] == 2


def test_duplicate_lands_right_after_the_original(world, seed):
    a, b, c = seed(3)
    update_block(actor_id=world.member, block_id=b, data={"properties": {"checked": True}})

    result = duplicate_block(actor_id=world.member, block_id=b)
    clone = result["block"]

    assert clone["_id"] not in (a, b, c)
    assert clone["content"] == "block 1"
    assert clone["properties"] == {"checked": True}
    assert result["version"] == 5
    assert _ordered_ids() == [a, b, clone["_id"], c]
    assert stored_positions(world.private_page) == [(a, 0), (b, 1), (clone["_id"], 2), (c, 3)]


def test_positions_stay_contiguous_across_mixed_edits(world, seed):
    ids = seed(4)
    duplicate_block(actor_id=world.member, block_id=ids[0])
    delete_block(actor_id=world.member, block_id=ids[2])
    update_block_position(actor_id=world.member, block_id=ids[3], position=0)
    create_block(actor_id=world.member, page_id=world.private_page, block_type="text", position=2)
    delete_block(actor_id=world.member, block_id=ids[1])

    positions = [position for _, position in stored_positions(world.private_page)]
    assert positions == list(range(len(positions)))
    assert [block_id for block_id, _ in stored_positions(world.private_page)] == _ordered_ids()
    assert page_content.get(world.private_page)["version"] == 9
