import time
from contextlib import contextmanager

from sqlalchemy import event
from sqlalchemy.exc import OperationalError

from gremlinlink.application.analytics import ClickRecorder
from gremlinlink.application.resolver import BlockResolver
from gremlinlink.domain.exceptions import StoreUnavailable
from gremlinlink.domain.outcomes import Error, ErrorKind, NotFound, Redirect, Rendered
from gremlinlink.models import ClickEvent
from gremlinlink.renderers import RenderContext
from gremlinlink.store import BlockStore


class ChildLoadSpy(BlockStore):
    def __init__(self):
        super().__init__()
        self.child_calls = []

    def get_children(self, parent_id, **kwargs):
        self.child_calls.append(parent_id)
        return super().get_children(parent_id, **kwargs)


class UnreachableStore(BlockStore):
    def get_by_slug(self, slug, **kwargs):
        raise StoreUnavailable("connection refused")


class HangingClickStore:
    def record_click(self, block_id, **kwargs):
        time.sleep(1)
        raise StoreUnavailable("analytics store unreachable")


def test_redirect_block_resolves_to_redirect(make_block):
    make_block("docs", renderer="redirect", data={"url": "https://example.com"})

    outcome = BlockResolver().resolve("docs")

    assert outcome == Redirect(url="https://example.com", status_code=302, cache_ttl=3600)


def test_redirect_without_url_is_not_found(make_block):
    make_block("missing-url", renderer="redirect", data={})

    outcome = BlockResolver().resolve("missing-url")

    assert isinstance(outcome, NotFound)


def test_unknown_slug_is_not_found(app):
    outcome = BlockResolver().resolve("nothing-here")

    assert outcome == NotFound(ErrorKind.NOT_FOUND, "No block for slug 'nothing-here'")


def test_page_children_follow_display_order(make_block):
    bio = make_block("bio", renderer="page", data={"title": "Bio"})
    make_block("bio-heading", parent=bio, renderer="heading", display_order=1, data={"text": "Hi"})
    make_block("bio-text", parent=bio, renderer="text", display_order=0, data={"content": "About me"})

    outcome = BlockResolver().resolve("bio")

    assert isinstance(outcome, Rendered)
    assert [child.renderer for child in outcome.block.children] == ["text", "heading"]
    assert [child["renderer"] for child in outcome.content["children"]] == ["text", "heading"]
    assert outcome.cache_ttl == 1800


def test_nested_children_are_loaded(make_block):
    page = make_block("nested", renderer="page")
    section = make_block("nested-section", parent=page, renderer="page")
    make_block("nested-leaf", parent=section, renderer="text", data={"content": "deep"})

    outcome = BlockResolver().resolve("nested")

    assert outcome.block.children[0].children[0].slug == "nested-leaf"


def test_redirect_never_loads_children(make_block):
    docs = make_block("docs", renderer="redirect", data={"url": "https://example.com"})
    make_block("docs-note", parent=docs, data={"content": "ignored"})
    store = ChildLoadSpy()

    outcome = BlockResolver(store=store).resolve("docs")

    assert isinstance(outcome, Redirect)
    assert store.child_calls == []


def test_unpublished_children_are_only_visible_in_preview(make_block):
    page = make_block("bio", renderer="page")
    make_block("bio-live", parent=page, data={"content": "live"})
    make_block("bio-draft", parent=page, data={"content": "draft"}, is_published=False)

    public = BlockResolver().resolve("bio")
    preview = BlockResolver().resolve("bio", include_unpublished=True)

    assert [c.slug for c in public.block.children] == ["bio-live"]
    assert [c.slug for c in preview.block.children] == ["bio-live", "bio-draft"]


def test_unknown_renderer_degrades_to_not_found(make_block):
    make_block("legacy", renderer="video", data={"url": "https://example.com"})

    outcome = BlockResolver().resolve("legacy")

    assert outcome == NotFound(ErrorKind.UNKNOWN_RENDERER, "Unknown renderer: video")


def test_store_failure_becomes_error_outcome(app):
    outcome = BlockResolver(store=UnreachableStore()).resolve("docs")

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorKind.STORE_UNAVAILABLE


def test_successful_resolution_records_a_click(db, make_block, recorder):
    block = make_block("docs", renderer="redirect", data={"url": "https://example.com"})
    context = RenderContext(user_agent="pytest", referrer="https://ref.example", country="DE")

    BlockResolver(recorder=recorder).resolve("docs", context)
    assert recorder.flush(timeout=5)

    click = db.session.query(ClickEvent).filter_by(block_id=block.id).one()
    assert click.type == "redirect"
    assert click.user_agent == "pytest"
    assert click.country == "DE"


def test_preview_does_not_record_clicks(db, make_block, recorder):
    make_block("bio", renderer="page")

    BlockResolver(recorder=recorder).resolve("bio", RenderContext(is_preview=True))
    assert recorder.flush(timeout=5)

    assert db.session.query(ClickEvent).count() == 0


def test_failed_resolution_records_nothing(db, make_block, recorder):
    make_block("missing-url", renderer="redirect", data={})

    BlockResolver(recorder=recorder).resolve("missing-url")
    assert recorder.flush(timeout=5)

    assert db.session.query(ClickEvent).count() == 0


def test_resolution_does_not_wait_for_a_hanging_analytics_store(app, db, make_block):
    make_block("docs", renderer="redirect", data={"url": "https://example.com"})
    recorder = ClickRecorder(app, store_factory=HangingClickStore)

    try:
        started = time.monotonic()
        outcome = BlockResolver(recorder=recorder).resolve("docs")
        elapsed = time.monotonic() - started

        assert isinstance(outcome, Redirect)
        assert elapsed < 0.5
        assert recorder.flush(timeout=5)
        assert db.session.query(ClickEvent).count() == 0
    finally:
        recorder.shutdown()


@contextmanager
def failing_statements(engine, marker):
    """Make every statement containing `marker` fail as if the database dropped."""

    def fail(conn, cursor, statement, parameters, context, executemany):
        if marker in statement:
            raise OperationalError(statement, parameters, Exception("database is locked"))

    event.listen(engine, "before_cursor_execute", fail)
    try:
        yield
    finally:
        event.remove(engine, "before_cursor_execute", fail)


@contextmanager
def counted_selects(engine):
    statements = []

    def count(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT"):
            statements.append(statement)

    event.listen(engine, "before_cursor_execute", count)
    try:
        yield statements
    finally:
        event.remove(engine, "before_cursor_execute", count)


def test_store_failure_while_loading_children_becomes_error(db, make_block):
    bio = make_block("bio", renderer="page")
    make_block("bio-text", parent=bio, data={"content": "x"})

    with failing_statements(db.engine, "content_blocks.parent_id = "):
        outcome = BlockResolver().resolve("bio")

    assert isinstance(outcome, Error)
    assert outcome.reason is ErrorKind.STORE_UNAVAILABLE


def test_store_failure_on_landing_lookup_becomes_error(db, make_block):
    make_block("docs", renderer="redirect", data={"url": "https://example.com"})

    with failing_statements(db.engine, "landing_selection"):
        outcome = BlockResolver().resolve("docs")

    assert isinstance(outcome, Error)


def test_redirect_resolution_is_a_single_query(db, make_block):
    make_block("docs", renderer="redirect", data={"url": "https://example.com"})
    db.session.expire_all()

    with counted_selects(db.engine) as statements:
        outcome = BlockResolver().resolve("docs")

    assert isinstance(outcome, Redirect)
    assert len(statements) == 1


def test_tree_resolution_loads_landing_with_each_block(db, make_block):
    bio = make_block("bio", renderer="page")
    make_block("bio-a", parent=bio, data={"content": "a"})
    make_block("bio-b", parent=bio, data={"content": "b"})
    db.session.expire_all()

    with counted_selects(db.engine) as statements:
        outcome = BlockResolver().resolve("bio")

    assert isinstance(outcome, Rendered)
    # page lookup, its children, then one child fetch per child
    assert len(statements) == 4
