from .block import normalize_block, _iso

def normalize_page_content(page_id, content, blocks):
    """
    PageContent with its block ids resolved to block objects.
    A page that was never edited reports version 0 and no blocks.
    """
    if not content:
        return {
            "page_id": page_id,
            "version": 0,
            "blocks": [],
            "last_edited_by": None,
            "last_edited_at": None,
        }

    return {
        "page_id": page_id,
        "version": content["version"],
        "blocks": [normalize_block(b) for b in blocks],
        "last_edited_by": content.get("last_edited_by"),
        "last_edited_at": _iso(content.get("last_edited_at")),
    }
