# ideahive/api/v1/templates.py
from flask import request, jsonify
from flask_jwt_extended import jwt_required
from ideahive.application import content
from ideahive.normalizers.block import normalize_block
from ideahive.utils.decorators import with_actor
from ideahive.utils.optimistic_lock import (
    expected_version_from_request,
    unmodified_since_from_request,
)
from . import v1_bp


@v1_bp.route("/pages/<page_id>/apply-template/<template_id>", methods=["POST"])
@jwt_required()
@with_actor
def apply_template(page_id, template_id, actor_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    overwrite = data.get("overwrite", False)
    if not isinstance(overwrite, bool):
        return jsonify({"error": "BadRequest", "message": "overwrite must be a boolean"}), 400

    result = content.apply_template(
        actor_id=actor_id,
        page_id=page_id,
        template_id=template_id,
        overwrite=overwrite,
        expected_version=expected_version_from_request(),
        unmodified_since=unmodified_since_from_request(),
    )

    return jsonify({
        "message": "Template applied",
        "page_id": page_id,
        "template_id": template_id,
        "overwrite": overwrite,
        "version": result["version"],
        "blocks": [normalize_block(b) for b in result["blocks"]]
    }), 200
