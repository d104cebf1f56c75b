"""
Workspace permission checks and page/template lookups.

The content engine treats these as an external oracle: it asks who may
read or edit a page and where a page lives, never how roles are stored.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ideahive.domain.roles import MEMBER, VIEWER, normalize_role, role_at_least
from ideahive.errors import ForbiddenError, NotFoundError
from ideahive.extensions import db
from ideahive.models.page import Page
from ideahive.models.template import Template
from ideahive.models.workspace import WorkspaceMember
from ideahive.utils.transaction import transactional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageMeta:
    page_id: str
    workspace_id: str
    is_public: bool


@dataclass(frozen=True)
class TemplateMeta:
    template_id: str
    workspace_id: Optional[str]
    is_public: bool
    created_by: str


def check_membership(workspace_id: str, user_id: Optional[str]) -> Optional[str]:
    """Return the caller's role in the workspace, or None."""
    if not user_id:
        return None

    member = WorkspaceMember.query.filter_by(
        workspace_id=workspace_id,
        user_id=user_id,
    ).first()
    return normalize_role(member.role) if member else None


def get_page_meta(page_id: str) -> PageMeta:
    page = db.session.get(Page, page_id)
    if not page:
        raise NotFoundError("Page not found")

    return PageMeta(
        page_id=page.id,
        workspace_id=page.workspace_id,
        is_public=bool(page.is_public),
    )


def get_template_meta(template_id: str) -> TemplateMeta:
    template = db.session.get(Template, template_id)
    if not template:
        raise NotFoundError("Template not found")

    return TemplateMeta(
        template_id=template.id,
        workspace_id=template.workspace_id,
        is_public=bool(template.is_public),
        created_by=template.created_by,
    )


def require_page_read(page_id: str, user_id: Optional[str]) -> PageMeta:
    """Public pages are readable by anyone; private ones need any membership."""
    meta = get_page_meta(page_id)
    if meta.is_public:
        return meta

    if not role_at_least(check_membership(meta.workspace_id, user_id), VIEWER):
        raise ForbiddenError("You do not have access to this page")
    return meta


def require_page_edit(page_id: str, user_id: Optional[str]) -> PageMeta:
    meta = get_page_meta(page_id)

    if not role_at_least(check_membership(meta.workspace_id, user_id), MEMBER):
        raise ForbiddenError("You do not have permission to edit this page")
    return meta


def require_template_read(
    template: TemplateMeta,
    *,
    page: PageMeta,
    user_id: str,
) -> None:
    """
    A template may be applied when it is public, owned by the caller,
    scoped to the target page's workspace, or scoped to another workspace
    the caller belongs to.
    """
    if template.is_public or template.created_by == user_id:
        return

    if template.workspace_id:
        if template.workspace_id == page.workspace_id:
            return
        if check_membership(template.workspace_id, user_id):
            return

    raise ForbiddenError("You do not have permission to use this template")


def touch_page_timestamp(page_id: str) -> bool:
    """
    Best-effort bump of pages.updated_at after a content commit.
    Failures are logged and swallowed; the document store is authoritative.
    """
    try:
        with transactional(f"updated_at touch for page {page_id}") as session:
            page = session.get(Page, page_id)
            if page is None:
                return False
            page.updated_at = datetime.now(timezone.utc)
        return True
    except SQLAlchemyError as exc:
        logger.warning("Could not touch updated_at for page %s: %s", page_id, exc)
        return False
