# ideahive/api/v1/blocks.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from ideahive.application import content
from ideahive.documents.collections import parse_object_id
from ideahive.normalizers.block import normalize_block
from ideahive.utils.decorators import with_actor, json_object_required
from ideahive.utils.optimistic_lock import (
    expected_version_from_request,
    unmodified_since_from_request,
)
from . import v1_bp


def _preconditions():
    return {
        "expected_version": expected_version_from_request(),
        "unmodified_since": unmodified_since_from_request(),
    }


@v1_bp.route("/blocks", methods=["POST"])
@jwt_required()
@with_actor
@json_object_required
def create_block(actor_id):
    data = request.get_json()

    if not data.get("page_id"):
        return jsonify({"error": "BadRequest", "message": "page_id is required"}), 400

    result = content.create_block(
        actor_id=actor_id,
        page_id=str(data["page_id"]),
        block_type=data.get("type"),
        content=data.get("content"),
        position=data.get("position"),
        properties=data.get("properties"),
        **_preconditions(),
    )

    return jsonify({
        "block": normalize_block(result["block"]),
        "version": result["version"]
    }), 201


@v1_bp.route("/blocks/<block_id>", methods=["GET"])
@jwt_required()
@with_actor
def get_block(block_id, actor_id):
    block = content.get_block(
        actor_id=actor_id,
        block_id=parse_object_id(block_id, label="block id"),
    )
    return jsonify(normalize_block(block))


@v1_bp.route("/blocks/<block_id>", methods=["PUT"])
@jwt_required()
@with_actor
@json_object_required
def update_block(block_id, actor_id):
    result = content.update_block(
        actor_id=actor_id,
        block_id=parse_object_id(block_id, label="block id"),
        data=request.get_json(),
        **_preconditions(),
    )

    return jsonify({
        "block": normalize_block(result["block"]),
        "version": result["version"]
    }), 200


@v1_bp.route("/blocks/<block_id>", methods=["DELETE"])
@jwt_required()
@with_actor
def delete_block(block_id, actor_id):
    result = content.delete_block(
        actor_id=actor_id,
        block_id=parse_object_id(block_id, label="block id"),
        **_preconditions(),
    )

    return jsonify({
        "message": "Block deleted",
        "block_id": str(result["block_id"]),
        "version": result["version"]
    }), 200


@v1_bp.route("/blocks/<block_id>/position", methods=["PUT"])
@jwt_required()
@with_actor
@json_object_required
def update_block_position(block_id, actor_id):
    data = request.get_json()

    if "position" not in data:
        return jsonify({"error": "BadRequest", "message": "position is required"}), 400

    result = content.update_block_position(
        actor_id=actor_id,
        block_id=parse_object_id(block_id, label="block id"),
        position=data["position"],
        **_preconditions(),
    )

    return jsonify({
        "message": "Position unchanged" if result["unchanged"] else "Block moved",
        "unchanged": result["unchanged"],
        "block": normalize_block(result["block"]),
        "version": result["version"]
    }), 200


@v1_bp.route("/blocks/<block_id>/duplicate", methods=["POST"])
@jwt_required()
@with_actor
def duplicate_block(block_id, actor_id):
    result = content.duplicate_block(
        actor_id=actor_id,
        block_id=parse_object_id(block_id, label="block id"),
        **_preconditions(),
    )

    return jsonify({
        "block": normalize_block(result["block"]),
        "version": result["version"]
    }), 201
