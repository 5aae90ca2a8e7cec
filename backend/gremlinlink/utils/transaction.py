from contextlib import contextmanager

from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError

from gremlinlink.extensions import db
from gremlinlink.domain.exceptions import StoreUnavailable


@contextmanager
def transactional(session=None):
    """
    Context manager for database transactions.

    Connection loss and pool/statement timeouts surface as StoreUnavailable;
    anything else is re-raised unchanged after the rollback.
    """
    session = session or db.session
    try:
        yield session
        session.commit()
    except (OperationalError, PoolTimeoutError) as exc:
        session.rollback()
        raise StoreUnavailable(f"Block store unavailable: {exc.__class__.__name__}") from exc
    except Exception:
        session.rollback()
        raise
