# ideahive/api/v1/page_content.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from ideahive.application import content
from ideahive.normalizers.block import normalize_block
from ideahive.normalizers.page_content import normalize_page_content
from ideahive.utils.decorators import with_actor, json_object_required
from ideahive.utils.optimistic_lock import (
    expected_version_from_request,
    unmodified_since_from_request,
)
from . import v1_bp


@v1_bp.route("/pages/<page_id>/content", methods=["GET"])
@jwt_required()
@with_actor
def get_page_content(page_id, actor_id):
    record, blocks = content.get_page_content(actor_id=actor_id, page_id=page_id)
    return jsonify(normalize_page_content(page_id, record, blocks))


@v1_bp.route("/pages/<page_id>/content", methods=["PUT"])
@jwt_required()
@with_actor
@json_object_required
def replace_page_content(page_id, actor_id):
    data = request.get_json()

    result = content.replace_page_content(
        actor_id=actor_id,
        page_id=page_id,
        blocks=data.get("blocks"),
        expected_version=expected_version_from_request(),
        unmodified_since=unmodified_since_from_request(),
    )

    return jsonify({
        "message": "Page content updated",
        "page_id": page_id,
        "version": result["version"],
        "blocks": [normalize_block(b) for b in result["blocks"]]
    }), 200


@v1_bp.route("/pages/<page_id>/history", methods=["GET"])
@jwt_required()
@with_actor
def get_page_history(page_id, actor_id):
    entries = content.get_page_history(actor_id=actor_id, page_id=page_id)
    return jsonify({
        "page_id": page_id,
        "history": entries
    })


@v1_bp.route("/pages/<page_id>/history/<int:version>", methods=["GET"])
@jwt_required()
@with_actor
def get_page_version(page_id, version, actor_id):
    return jsonify(
        content.get_page_version(actor_id=actor_id, page_id=page_id, version=version)
    )


@v1_bp.route("/pages/<page_id>/restore/<int:version>", methods=["POST"])
@jwt_required()
@with_actor
def restore_page_version(page_id, version, actor_id):
    result = content.restore_page_version(
        actor_id=actor_id,
        page_id=page_id,
        version=version,
        expected_version=expected_version_from_request(),
        unmodified_since=unmodified_since_from_request(),
    )

    return jsonify({
        "message": f"Restored version {version}",
        "page_id": page_id,
        "version": result["version"],
        "restored_from": result["restored_from"]
    }), 200
