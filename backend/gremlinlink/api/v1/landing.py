from flask import jsonify, request

from gremlinlink.application.landing import landing_status, remove_landing_block, set_landing_block
from gremlinlink.normalizers.block import normalize_block
from gremlinlink.utils.decorators import admin_required
from . import v1_bp


def _normalize_status(status, admin):
    landing = status["landing_block"]
    return {
        "has_landing_block": status["has_landing_block"],
        "landing_block": normalize_block(landing, admin=admin) if landing is not None else None,
        "public_block_count": status["public_block_count"],
        "total_block_count": status["total_block_count"],
    }


@v1_bp.route("/admin/landing-block", methods=["GET"])
@admin_required
def get_landing_block_status():
    return jsonify(_normalize_status(landing_status(), admin=True)), 200


@v1_bp.route("/admin/landing-block", methods=["POST", "PUT"])
@admin_required
def set_landing():
    data = request.get_json(silent=True) or {}
    block_id = data.get("block_id")
    if not block_id:
        return jsonify({"error": "block_id is required"}), 400

    block = set_landing_block(block_id=block_id)
    return jsonify({
        "message": "Landing block set",
        "landing_block": normalize_block(block, admin=True),
    }), 200


@v1_bp.route("/admin/landing-block", methods=["DELETE"])
@admin_required
def remove_landing():
    previous = remove_landing_block()
    return jsonify({
        "message": "Landing block removed" if previous is not None else "No landing block set",
        "previous_block_id": previous.id if previous is not None else None,
    }), 200
