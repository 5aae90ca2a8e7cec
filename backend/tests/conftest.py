import pytest
from flask_jwt_extended import create_access_token

from gremlinlink import create_app
from gremlinlink.extensions import db as _db
from gremlinlink.models import ContentBlock, User


@pytest.fixture
def app(tmp_path):
    # file-backed so click writes from worker threads see the same database
    app = create_app(
        "testing",
        overrides={"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'gremlinlink.db'}"},
    )

    with app.app_context():
        _db.create_all()
        yield app
        app.extensions["click_recorder"].shutdown()
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def recorder(app):
    return app.extensions["click_recorder"]


@pytest.fixture
def admin_user(db):
    user = User(email="admin@example.com", name="Admin", role="admin")
    user.set_password("correct-horse-battery")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def auth_headers(admin_user):
    token = create_access_token(
        identity=admin_user.id,
        additional_claims={"role": "admin", "email": admin_user.email},
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_block(db):
    """Insert a block directly, bypassing the admin validation path."""

    def _make(slug, renderer="text", data=None, parent=None, metadata=None, **fields):
        block = ContentBlock(
            slug=slug,
            renderer=renderer,
            data=data if data is not None else {},
            meta=metadata or {},
            kind="child" if parent is not None else "root",
            parent_id=parent.id if parent is not None else None,
            **fields,
        )
        db.session.add(block)
        db.session.commit()
        return block

    return _make
