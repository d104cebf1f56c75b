from functools import wraps
from flask import request, jsonify
from flask_jwt_extended import get_jwt_identity

def with_actor(fn):
    """
    Injects the authenticated user's id as `actor_id`.
    Must sit below @jwt_required().
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        identity = get_jwt_identity()
        if not identity:
            return jsonify({"error": "Unauthorized", "message": "Missing user identity"}), 401

        return fn(*args, actor_id=str(identity), **kwargs)
    return wrapper

def json_object_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "BadRequest", "message": "Request body must be a JSON object"}), 400

        return fn(*args, **kwargs)
    return wrapper
