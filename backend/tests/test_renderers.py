import pytest

from gremlinlink.domain.outcomes import BlockNode, ErrorKind
from gremlinlink.renderers import (
    RENDERERS,
    JsonResult,
    RedirectResult,
    RenderFailure,
    RendererType,
    get_block_metadata,
    get_cache_ttl,
    render_block,
    validate_block_data,
)
from gremlinlink.renderers.article import reading_stats


def node(renderer, data=None, metadata=None, slug="block", children=None):
    return BlockNode(
        id=f"{slug}-id",
        slug=slug,
        kind="root",
        renderer=renderer,
        data=data or {},
        metadata=metadata or {},
        children=children or [],
    )


def test_every_renderer_type_is_registered():
    assert set(RENDERERS) == set(RendererType)


# ------------------------
# Redirect
# ------------------------

def test_redirect_defaults_to_302():
    result = render_block(node("redirect", {"url": "https://example.com"}))
    assert result == RedirectResult(url="https://example.com", status_code=302)


def test_redirect_passes_stored_status_code_through():
    result = render_block(node("redirect", {"url": "https://example.com", "statusCode": 301}))
    assert result.status_code == 301


def test_redirect_falls_back_to_other_url_fields():
    result = render_block(node("redirect", {"caption": "foo", "link": "https://example.com/x"}))
    assert isinstance(result, RedirectResult)
    assert result.url == "https://example.com/x"


def test_redirect_without_any_url_is_not_found():
    result = render_block(node("redirect", {"caption": "foo"}))
    assert isinstance(result, RenderFailure)
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.status_code == 404


def test_redirect_with_relative_url_is_invalid_data():
    result = render_block(node("redirect", {"url": "/docs"}))
    assert isinstance(result, RenderFailure)
    assert result.kind is ErrorKind.INVALID_DATA
    assert result.status_code == 400


def test_redirect_metadata_is_never_indexed():
    meta = get_block_metadata(node("redirect", {"url": "https://example.com"}))
    assert meta.robots == "noindex,nofollow"
    assert meta.title == "Redirect"


# ------------------------
# Content renderers
# ------------------------

def test_article_renders_and_prefers_excerpt_for_description():
    block = node(
        "article",
        {"title": "Hello", "content": [{"type": "p", "content": "one two"}], "excerpt": "Short"},
        metadata={"description": "Long description"},
    )

    result = render_block(block)

    assert isinstance(result, JsonResult)
    assert result.data["title"] == "Hello"
    assert result.metadata["description"] == "Short"
    assert result.metadata["og_type"] == "article"
    assert result.metadata["schema_org"]["@type"] == "Article"


def test_article_without_title_is_not_found():
    result = render_block(node("article", {"content": []}))
    assert isinstance(result, RenderFailure)
    assert result.kind is ErrorKind.NOT_FOUND


def test_reading_stats_rounds_to_at_least_one_minute():
    assert reading_stats([{"content": "a few words"}]) == (3, 1)
    assert reading_stats([" ".join(["word"] * 500)]) == (500, 2)
    assert reading_stats([]) == (0, 0)


def test_image_accepts_media_asset_and_legacy_url():
    asset = render_block(node("image", {"image": {"url": "https://cdn.example.com/a.png", "width": 10}}))
    legacy = render_block(node("image", {"url": "https://cdn.example.com/b.png", "alt_text": "B"}))

    assert asset.data["url"] == "https://cdn.example.com/a.png"
    assert asset.data["width"] == 10
    assert legacy.data["alt_text"] == "B"
    assert legacy.metadata["og_image"] == "https://cdn.example.com/b.png"


def test_image_without_url_is_not_found():
    assert render_block(node("image", {"caption": "nothing"})).kind is ErrorKind.NOT_FOUND


def test_card_requires_title():
    assert isinstance(render_block(node("card", {"title": "Docs", "url": "https://x.io"})), JsonResult)
    assert render_block(node("card", {"description": "no title"})).kind is ErrorKind.NOT_FOUND


def test_gallery_images_must_have_urls():
    result = render_block(node("gallery", {"images": [{"alt_text": "missing url"}]}))
    assert result.kind is ErrorKind.INVALID_DATA


def test_gallery_defaults_to_grid_layout():
    result = render_block(node("gallery", {"images": [{"url": "https://cdn.example.com/1.png"}]}))
    assert result.data["layout"] == "grid"
    assert result.metadata["og_image"] == "https://cdn.example.com/1.png"


def test_empty_gallery_is_not_found():
    assert render_block(node("gallery", {"images": []})).kind is ErrorKind.NOT_FOUND


def test_page_renders_children_in_given_order():
    children = [
        node("text", {"content": "intro"}, slug="intro"),
        node("heading", {"text": "Title", "level": 1}, slug="title"),
        node("heading", {}, slug="broken"),
    ]

    result = render_block(node("page", {"title": "Bio"}, children=children))

    assert [c["slug"] for c in result.data["children"]] == ["intro", "title", "broken"]
    assert result.data["children"][1]["content"]["level"] == 1
    assert result.data["children"][2]["error"] == "not_found"


# ------------------------
# Registry behaviour
# ------------------------

def test_unknown_renderer_is_reported_distinctly():
    result = render_block(node("video", {"url": "https://example.com"}))
    assert isinstance(result, RenderFailure)
    assert result.kind is ErrorKind.UNKNOWN_RENDERER


def test_unknown_renderer_gets_generic_metadata_and_default_ttl():
    meta = get_block_metadata(node("video"))
    assert meta.title == "Content"
    assert meta.description == "View content"
    assert get_cache_ttl("video") == 300


@pytest.mark.parametrize("renderer,ttl", [
    ("redirect", 3600),
    ("article", 1800),
    ("image", 7200),
    ("card", 3600),
    ("gallery", 3600),
])
def test_cache_ttls(renderer, ttl):
    assert get_cache_ttl(renderer) == ttl


def test_metadata_title_falls_back_to_block_metadata():
    meta = get_block_metadata(node("card", {"title": ""}, metadata={"title": "From metadata"}))
    assert meta.title == "From metadata"


def test_validate_block_data():
    assert validate_block_data("redirect", {"url": "https://example.com"})
    assert not validate_block_data("redirect", {"url": "not a url"})
    assert not validate_block_data("heading", {"text": "x", "level": 9})
    assert not validate_block_data("video", {})


def test_renderer_crash_becomes_render_failure(monkeypatch):
    renderer = RENDERERS[RendererType.TEXT]

    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(renderer, "_render", boom)

    result = render_block(node("text", {"content": "x"}))

    assert isinstance(result, RenderFailure)
    assert result.kind is ErrorKind.RENDER_FAILED


def test_redirect_keeps_a_stored_zero_status_code():
    result = render_block(node("redirect", {"url": "https://example.com", "statusCode": 0}))
    assert result.status_code == 0
