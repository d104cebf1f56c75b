from .exceptions import InvariantViolation

def assert_block_positions(blocks):
    positions = [block["position"] for block in blocks]
    if not positions:
        return

    expected = list(range(len(positions)))
    if sorted(positions) != expected:
        raise InvariantViolation(
            f"Block positions are not contiguous starting from 0: {positions}"
        )

def assert_single_page(blocks, page_id):
    foreign = [str(block["_id"]) for block in blocks if block.get("page_id") != page_id]
    if foreign:
        raise InvariantViolation(
            f"Blocks {foreign} do not belong to page {page_id}."
        )

def assert_unique_ids(blocks):
    ids = [block["_id"] for block in blocks]
    if len(ids) != len(set(ids)):
        raise InvariantViolation("Page content references the same block twice.")
