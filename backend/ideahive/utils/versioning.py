import copy

SNAPSHOT_FIELDS = (
    "_id",
    "page_id",
    "type",
    "content",
    "properties",
    "children",
    "position",
    "created_by",
    "created_at",
    "updated_at",
)

def snapshot_block(block):
    return {
        field: copy.deepcopy(block[field])
        for field in SNAPSHOT_FIELDS
        if field in block
    }

def snapshot_blocks(blocks):
    """
    Content-level snapshot of an ordered block list.
    Stores whole blocks so a version stays readable after its blocks
    are edited or deleted.
    """
    return [snapshot_block(block) for block in blocks]

def is_legacy_snapshot(content):
    """Older history entries recorded block ids only."""
    return any(not isinstance(item, dict) for item in content or [])
