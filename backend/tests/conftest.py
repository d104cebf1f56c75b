from types import SimpleNamespace

import mongomock
import pytest
from flask_jwt_extended import create_access_token

from ideahive import create_app
from ideahive.extensions import db
from ideahive.models import Page, Template, User, Workspace, WorkspaceMember


@pytest.fixture
def app():
    app = create_app("testing", mongo_client=mongomock.MongoClient())

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def events(app):
    """Every broadcast published to the private page's room."""
    received = []
    app.extensions["broadcaster"].join(
        "page-private",
        "observer",
        lambda event, payload: received.append((event, payload)),
    )
    return received


def _user(key, full_name=None):
    user = User(id=f"user-{key}", email=f"{key}@ideahive.test", full_name=full_name)
    db.session.add(user)
    return user.id


@pytest.fixture
def world(app):
    """
    Two workspaces:
    - "ws-main" with one member per role, a private and a public page
    - "ws-other" where only `other` is a member
    """
    ids = SimpleNamespace(
        owner=_user("owner", "Olivia Owner"),
        admin=_user("admin", "Adam Admin"),
        member=_user("member", "Mia Member"),
        viewer=_user("viewer", "Victor Viewer"),
        outsider=_user("outsider"),
        other=_user("other"),
    )

    db.session.add(Workspace(id="ws-main", name="Main", owner_id=ids.owner))
    db.session.add(Workspace(id="ws-other", name="Other", owner_id=ids.other))

    for user_id, role in (
        (ids.owner, "OWNER"),
        (ids.admin, "ADMIN"),
        (ids.member, "MEMBER"),
        (ids.viewer, "VIEWER"),
    ):
        db.session.add(WorkspaceMember(workspace_id="ws-main", user_id=user_id, role=role))
    db.session.add(WorkspaceMember(workspace_id="ws-other", user_id=ids.other, role="OWNER"))
    db.session.add(WorkspaceMember(workspace_id="ws-other", user_id=ids.member, role="VIEWER"))

    db.session.add(Page(id="page-private", workspace_id="ws-main", title="Private", created_by=ids.owner))
    db.session.add(Page(id="page-public", workspace_id="ws-main", title="Public", is_public=True, created_by=ids.owner))
    db.session.add(Page(id="page-foreign", workspace_id="ws-other", title="Foreign", created_by=ids.other))

    db.session.commit()

    ids.private_page = "page-private"
    ids.public_page = "page-public"
    ids.foreign_page = "page-foreign"
    return ids


@pytest.fixture
def auth(app):
    def headers(user_id, **extra):
        token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}", **extra}
    return headers


@pytest.fixture
def make_template(app):
    from ideahive.documents import templates

    def make(template_id, content, *, created_by, workspace_id=None, is_public=False):
        db.session.add(Template(
            id=template_id,
            name=template_id,
            workspace_id=workspace_id,
            is_public=is_public,
            created_by=created_by,
        ))
        db.session.commit()
        if content is not None:
            templates.put_content(template_id, content)
        return template_id
    return make


@pytest.fixture
def seed(world):
    """Create `count` text blocks on the private page, one version each."""
    from ideahive.application.content import create_block

    def make(count, page_id="page-private", actor_id=None):
        blocks = []
        for index in range(count):
            result = create_block(
                actor_id=actor_id or world.member,
                page_id=page_id,
                block_type="text",
                content=f"block {index}",
            )
            blocks.append(result["block"]["_id"])
        return blocks
    return make


def stored_positions(page_id):
    from ideahive.documents import block_store
    return [(block["_id"], block["position"]) for block in block_store.list_for_page(page_id)]
