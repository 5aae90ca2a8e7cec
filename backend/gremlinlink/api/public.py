"""
Public HTTP boundary: translates RenderOutcomes into responses.

Redirect -> HTTP redirect with the stored status code, Rendered -> JSON,
NotFound -> 404, Error -> 503. Failure details are never shown here.
"""
from flask import Blueprint, current_app, g, jsonify, redirect

from gremlinlink.application.landing import get_landing_block, get_public_blocks
from gremlinlink.application.resolver import BlockResolver, current_recorder
from gremlinlink.domain.exceptions import StoreUnavailable
from gremlinlink.domain.outcomes import Error, Redirect, Rendered
from gremlinlink.normalizers.block import normalize_public_block
from gremlinlink.normalizers.outcome import normalize_node
from gremlinlink.renderers import RenderContext

public_bp = Blueprint("public", __name__)


def _cache(response, ttl):
    if current_app.config.get("PUBLIC_CACHE_ENABLED", True):
        response.headers["Cache-Control"] = f"public, max-age={ttl}"
    return response


def outcome_response(outcome):
    if isinstance(outcome, Redirect):
        return _cache(redirect(outcome.url, code=outcome.status_code), outcome.cache_ttl)

    if isinstance(outcome, Rendered):
        response = jsonify({
            "block": normalize_node(outcome.block),
            "content": outcome.content,
            "metadata": outcome.metadata,
        })
        return _cache(response, outcome.cache_ttl)

    if isinstance(outcome, Error):
        return jsonify({"error": "Service unavailable"}), 503

    return jsonify({"error": "Not found"}), 404


def _resolver():
    return BlockResolver(recorder=current_recorder())


@public_bp.route("/", methods=["GET"])
def home():
    try:
        landing = get_landing_block()
        if landing is not None:
            context = getattr(g, "render_context", None) or RenderContext()
            return outcome_response(_resolver().resolve(landing.slug, context))

        blocks = get_public_blocks()
    except StoreUnavailable:
        return outcome_response(Error())

    return jsonify({"items": [normalize_public_block(b) for b in blocks]}), 200


@public_bp.route("/<slug>", methods=["GET"])
def resolve_slug(slug):
    context = getattr(g, "render_context", None) or RenderContext()
    return outcome_response(_resolver().resolve(slug, context))
