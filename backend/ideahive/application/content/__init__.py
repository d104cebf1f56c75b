from .blocks import (
    create_block,
    delete_block,
    duplicate_block,
    get_block,
    update_block,
    update_block_position,
)
from .history import get_page_history, get_page_version, restore_page_version
from .page_content import get_page_content, replace_page_content
from .templates import apply_template

__all__ = [
    "create_block",
    "get_block",
    "update_block",
    "delete_block",
    "update_block_position",
    "duplicate_block",
    "get_page_content",
    "replace_page_content",
    "get_page_history",
    "get_page_version",
    "restore_page_version",
    "apply_template",
]
