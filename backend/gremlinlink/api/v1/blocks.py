# gremlinlink/api/v1/blocks.py
from flask import current_app, g, jsonify, request

from gremlinlink.application.blocks import create_block, delete_block, reorder_children, update_block
from gremlinlink.application.blocks.schemas import BlockCreate, BlockUpdate, ChildOrder
from gremlinlink.application.landing import toggle_privacy
from gremlinlink.application.reports import DEFAULT_WINDOW_DAYS, block_analytics
from gremlinlink.application.resolver import BlockResolver
from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.domain.invariants.slug import assert_slug
from gremlinlink.domain.invariants.exceptions import InvariantViolation
from gremlinlink.models import BLOCK_KINDS
from gremlinlink.normalizers.block import normalize_block
from gremlinlink.normalizers.click import normalize_block_analytics
from gremlinlink.normalizers.outcome import normalize_outcome
from gremlinlink.normalizers.pagination import normalize_pagination
from gremlinlink.renderers import RenderContext, renderer_type
from gremlinlink.store import BlockStore
from gremlinlink.utils.decorators import admin_required
from gremlinlink.utils.optimistic_lock import enforce_optimistic_lock
from gremlinlink.utils.slugs import generate_unique_slug, is_slug_available
from . import v1_bp

MAX_PER_PAGE = 100


def _bool_arg(name):
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() in ("1", "true", "yes")


def _get_block_or_404(block_id):
    block = BlockStore().get_by_id(block_id)
    if block is None:
        raise BlockNotFound(f"Block {block_id} not found")
    return block


# ------------------------
# Blocks
# ------------------------

@v1_bp.route("/admin/blocks", methods=["POST"])
@admin_required
def create_block_view():
    payload = BlockCreate.model_validate(request.get_json(silent=True) or {})
    block = create_block(payload=payload)

    return jsonify({
        "id": block.id,
        "slug": block.slug,
        "message": "Block created successfully",
    }), 201


@v1_bp.route("/admin/blocks", methods=["GET"])
@admin_required
def list_blocks():
    page_num = request.args.get("page", 1, type=int)
    per_page = min(request.args.get("per_page", 20, type=int), MAX_PER_PAGE)

    renderer = request.args.get("renderer")
    if renderer and renderer_type(renderer) is None:
        return jsonify({"error": "Invalid renderer"}), 400

    kind = request.args.get("kind")
    if kind and kind not in BLOCK_KINDS:
        return jsonify({"error": "Invalid kind"}), 400

    query = BlockStore().query_blocks(
        renderer=renderer,
        kind=kind,
        published=_bool_arg("published"),
        search=request.args.get("q"),
    )
    pagination = query.paginate(page=page_num, per_page=per_page, error_out=False)

    return jsonify(
        normalize_pagination(
            pagination,
            lambda b: normalize_block(b, admin=True)
        )
    )


@v1_bp.route("/admin/blocks/<block_id>", methods=["GET"])
@admin_required
def get_block(block_id):
    block = _get_block_or_404(block_id)
    return jsonify(normalize_block(block, admin=True, include_children=True))


@v1_bp.route("/admin/blocks/<block_id>", methods=["PUT", "PATCH"])
@admin_required
def update_block_view(block_id):
    payload = BlockUpdate.model_validate(request.get_json(silent=True) or {})

    block, changed_fields = update_block(
        block_id=block_id,
        payload=payload,
        before_change=enforce_optimistic_lock,
    )

    if changed_fields:
        current_app.logger.info("Block %s updated: %s", block.slug, ", ".join(changed_fields))

    return jsonify({
        "message": "Block updated successfully",
        "changed_fields": changed_fields,
        "block": normalize_block(block, admin=True),
    }), 200


@v1_bp.route("/admin/blocks/<block_id>", methods=["DELETE"])
@admin_required
def delete_block_view(block_id):
    delete_block(block_id=block_id)
    return jsonify({"message": "Block deleted successfully"}), 200


@v1_bp.route("/admin/blocks/<block_id>/privacy", methods=["POST"])
@admin_required
def toggle_block_privacy(block_id):
    block = toggle_privacy(block_id=block_id)
    return jsonify({"id": block.id, "is_private": block.is_private}), 200


@v1_bp.route("/admin/blocks/<block_id>/analytics", methods=["GET"])
@admin_required
def get_block_analytics(block_id):
    days = request.args.get("days", DEFAULT_WINDOW_DAYS, type=int)
    summary = block_analytics(block_id=block_id, days=days)
    return jsonify(normalize_block_analytics(summary)), 200


# ------------------------
# Children
# ------------------------

@v1_bp.route("/admin/blocks/<block_id>/children", methods=["GET"])
@admin_required
def list_children(block_id):
    _get_block_or_404(block_id)
    children = BlockStore().get_children(block_id)
    return jsonify([normalize_block(child, admin=True) for child in children])


@v1_bp.route("/admin/blocks/<block_id>/children", methods=["POST"])
@admin_required
def create_child(block_id):
    body = dict(request.get_json(silent=True) or {})
    body["parent_id"] = block_id
    block = create_block(payload=BlockCreate.model_validate(body))

    return jsonify({
        "id": block.id,
        "slug": block.slug,
        "display_order": block.display_order,
        "message": "Child block created successfully",
    }), 201


@v1_bp.route("/admin/blocks/<block_id>/children/order", methods=["PUT"])
@admin_required
def reorder_block_children(block_id):
    payload = ChildOrder.model_validate(request.get_json(silent=True) or {})
    children = reorder_children(parent_id=block_id, ordered_ids=payload.ordered_ids)

    return jsonify({
        "message": "Children reordered",
        "children": [{"id": c.id, "display_order": c.display_order} for c in children],
    }), 200


# ------------------------
# Slugs & preview
# ------------------------

@v1_bp.route("/admin/slugs/check", methods=["GET"])
@admin_required
def check_slug():
    slug = (request.args.get("slug") or "").strip()
    try:
        assert_slug(slug)
    except InvariantViolation as exc:
        return jsonify({"slug": slug, "available": False, "reason": str(exc)}), 200

    return jsonify({"slug": slug, "available": is_slug_available(slug, BlockStore())}), 200


@v1_bp.route("/admin/slugs/suggest", methods=["GET"])
@admin_required
def suggest_slug():
    title = (request.args.get("title") or "").strip()
    if not title:
        return jsonify({"error": "Title is required"}), 400

    return jsonify({"slug": generate_unique_slug(title, BlockStore())}), 200


@v1_bp.route("/admin/preview/<slug>", methods=["GET"])
@admin_required
def preview(slug):
    resolver = BlockResolver()
    context = getattr(g, "render_context", None) or RenderContext()
    context.is_preview = True

    outcome = resolver.resolve(slug, context, include_unpublished=True)
    return jsonify(normalize_outcome(outcome, detail=True)), 200
