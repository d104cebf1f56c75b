import logging

from pymongo.errors import PyMongoError
from sqlalchemy.exc import OperationalError

from ideahive.application.content import create_block
from ideahive.documents import block_store, page_content
from ideahive.extensions import db

GENERIC_500 = {"error": "InternalError", "message": "Internal server error"}


def _failing_commit():
    raise OperationalError("UPDATE pages", {}, Exception("database is locked"))


def test_failed_page_touch_is_logged_and_the_edit_stays_committed(world, seed, monkeypatch, caplog):
    (block_id,) = seed(1)
    monkeypatch.setattr(db.session, "commit", _failing_commit)

    with caplog.at_level(logging.WARNING, logger="ideahive"):
        result = create_block(actor_id=world.member, page_id=world.private_page, block_type="text")

    assert result["version"] == 2
    assert page_content.get(world.private_page)["version"] == 2
    assert block_store.get(result["block"]["_id"]) is not None
    assert "Could not touch updated_at" in caplog.text


def test_store_failure_returns_a_generic_500_and_commits_nothing(client, world, auth, monkeypatch):
    def broken_insert(blocks):
        raise PyMongoError("connection reset by 10.0.0.7:27017")

    monkeypatch.setattr(block_store, "insert_many", broken_insert)

    resp = client.post(
        "/api/v1/blocks",
        json={"page_id": world.private_page, "type": "text"},
        headers=auth(world.member),
    )

    assert resp.status_code == 500
    assert resp.get_json() == GENERIC_500
    assert b"10.0.0.7" not in resp.data
    assert page_content.get(world.private_page) is None


def test_unexpected_error_returns_a_generic_500(client, world, auth, monkeypatch):
    def broken_get(page_id):
        raise RuntimeError("secret stack detail")

    monkeypatch.setattr(page_content, "get", broken_get)

    resp = client.get(f"/api/v1/pages/{world.private_page}/content", headers=auth(world.viewer))

    assert resp.status_code == 500
    assert resp.get_json() == GENERIC_500
