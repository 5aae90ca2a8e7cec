import threading

import pytest

from gremlinlink.application.landing import (
    get_landing_block,
    get_public_blocks,
    landing_status,
    remove_landing_block,
    set_landing_block,
    toggle_privacy,
)
from gremlinlink.domain.exceptions import BlockNotFound
from gremlinlink.domain.invariants.exceptions import InvariantViolation
from gremlinlink.extensions import db as _db
from gremlinlink.models import ContentBlock, LandingSelection


def landing_slugs(db):
    db.session.expire_all()
    return [b.slug for b in db.session.query(ContentBlock).all() if b.is_landing_block]


def test_second_landing_block_replaces_the_first(db, make_block):
    a = make_block("a")
    b = make_block("b")

    set_landing_block(block_id=a.id)
    set_landing_block(block_id=b.id)

    assert get_landing_block().id == b.id
    db.session.expire_all()
    assert db.session.get(ContentBlock, a.id).is_landing_block is False
    assert landing_slugs(db) == ["b"]


def test_landing_block_is_made_public(db, make_block):
    block = make_block("home", is_private=True)

    set_landing_block(block_id=block.id)

    db.session.expire_all()
    assert db.session.get(ContentBlock, block.id).is_private is False


def test_unpublished_block_cannot_be_landing(make_block):
    block = make_block("draft", is_published=False)

    with pytest.raises(InvariantViolation):
        set_landing_block(block_id=block.id)

    assert get_landing_block() is None


def test_child_block_cannot_be_landing(make_block):
    page = make_block("bio", renderer="page")
    child = make_block("bio-text", parent=page, data={"content": "x"})

    with pytest.raises(InvariantViolation):
        set_landing_block(block_id=child.id)


def test_missing_block_cannot_be_landing(app):
    with pytest.raises(BlockNotFound):
        set_landing_block(block_id="does-not-exist")


def test_concurrent_landing_changes_leave_one_landing_block(app, db, make_block):
    blocks = [make_block(f"candidate-{i}") for i in range(6)]
    ids = [b.id for b in blocks]
    errors = []

    def worker(block_id):
        with app.app_context():
            try:
                set_landing_block(block_id=block_id)
            except Exception as exc:
                errors.append(exc)
            finally:
                _db.session.remove()

    threads = [threading.Thread(target=worker, args=(block_id,)) for block_id in ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
    assert db.session.query(LandingSelection).count() == 1
    assert len(landing_slugs(db)) == 1


def test_remove_landing_block_is_idempotent(make_block):
    block = make_block("home")
    set_landing_block(block_id=block.id)

    assert remove_landing_block().id == block.id
    assert remove_landing_block() is None
    assert get_landing_block() is None


def test_deleting_the_landing_block_clears_the_selection(db, make_block):
    block = make_block("home")
    set_landing_block(block_id=block.id)

    db.session.delete(db.session.get(ContentBlock, block.id))
    db.session.commit()

    assert get_landing_block() is None


def test_landing_block_cannot_be_made_private(db, make_block):
    block = make_block("home")
    set_landing_block(block_id=block.id)

    with pytest.raises(InvariantViolation):
        toggle_privacy(block_id=block.id)

    db.session.expire_all()
    assert db.session.get(ContentBlock, block.id).is_private is False


def test_toggle_privacy_flips_the_flag(make_block):
    block = make_block("notes")

    assert toggle_privacy(block_id=block.id).is_private is True
    assert toggle_privacy(block_id=block.id).is_private is False


def test_public_blocks_and_status(make_block):
    home = make_block("home")
    make_block("secret", is_private=True)
    make_block("draft", is_published=False)
    set_landing_block(block_id=home.id)

    status = landing_status()

    assert [b.slug for b in get_public_blocks()] == ["home"]
    assert status["has_landing_block"] is True
    assert status["landing_block"].slug == "home"
    assert status["public_block_count"] == 1
    assert status["total_block_count"] == 2
