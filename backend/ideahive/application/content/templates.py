import copy
import logging
from typing import Any, Dict, Optional

from ideahive.documents import templates
from ideahive.errors import NotFoundError
from ideahive.normalizers.block import normalize_block
from ideahive.services.permissions import (
    get_template_meta,
    require_page_edit,
    require_template_read,
)
from .protocol import page_mutation

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_BLOCK_TYPE = "text"


def apply_template(
    *,
    actor_id: str,
    page_id: str,
    template_id: str,
    overwrite: bool = False,
    expected_version: Optional[int] = None,
    unmodified_since=None,
) -> Dict[str, Any]:
    """
    Clone a template's blocks into a page.

    overwrite=True replaces every block on the page; otherwise the clones
    are appended after the existing blocks. Clones never share ids with
    the template.
    """
    page = require_page_edit(page_id, actor_id)
    template = get_template_meta(template_id)
    require_template_read(template, page=page, user_id=actor_id)

    content = templates.get_content(template_id)
    if content is None:
        raise NotFoundError("Template content not found")

    with page_mutation(
        page_id,
        actor_id=actor_id,
        expected_version=expected_version,
        unmodified_since=unmodified_since,
    ) as mutation:
        if overwrite:
            mutation.clear()

        added = []
        for index, item in enumerate(content):
            if not isinstance(item, dict):
                logger.warning(
                    "Skipping malformed entry %s of template %s", index, template_id
                )
                continue

            added.append(
                mutation.insert(
                    block_type=item.get("type") or DEFAULT_TEMPLATE_BLOCK_TYPE,
                    content=copy.deepcopy(item.get("content")),
                    properties=copy.deepcopy(item.get("properties")),
                    children=copy.deepcopy(item.get("children")),
                )
            )

        mutation.emit(
            "templateApplied",
            template_id=template_id,
            overwrite=overwrite,
            blocks=[normalize_block(block) for block in added],
        )

    return {
        "page_id": page_id,
        "template_id": template_id,
        "overwrite": overwrite,
        "version": mutation.committed_version,
        "blocks": added,
    }
