from flask import jsonify

from gremlinlink.application.landing import get_public_blocks, landing_status
from gremlinlink.normalizers.block import normalize_public_block
from . import v1_bp


@v1_bp.route("/public-blocks", methods=["GET"])
def public_blocks():
    blocks = get_public_blocks()
    return jsonify({"items": [normalize_public_block(b) for b in blocks]}), 200


@v1_bp.route("/landing-status", methods=["GET"])
def public_landing_status():
    status = landing_status()
    landing = status["landing_block"]
    return jsonify({
        "has_landing_block": status["has_landing_block"],
        "landing_slug": landing.slug if landing is not None else None,
        "public_block_count": status["public_block_count"],
    }), 200
