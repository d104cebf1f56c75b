from typing import Any, Dict

from ideahive.documents.block_store import MUTABLE_BLOCK_FIELDS
from ideahive.errors import BadRequestError


def require_block_type(value, label="type") -> str:
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError(f"{label} must be a non-empty string")
    return value


def require_position(value, label="position") -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequestError(f"{label} must be an integer")
    if value < 0:
        raise BadRequestError(f"{label} must not be negative")
    return value


def block_fields(data: Dict[str, Any], label="block") -> Dict[str, Any]:
    """Pick and check the mutable fields present in `data`."""
    fields = {key: data[key] for key in MUTABLE_BLOCK_FIELDS if key in data}

    if "type" in fields:
        require_block_type(fields["type"], f"{label}.type")
    if "properties" in fields:
        if fields["properties"] is None:
            fields["properties"] = {}
        elif not isinstance(fields["properties"], dict):
            raise BadRequestError(f"{label}.properties must be an object")
    if "children" in fields:
        if fields["children"] is None:
            fields["children"] = []
        elif not isinstance(fields["children"], list):
            raise BadRequestError(f"{label}.children must be an array")

    return fields
