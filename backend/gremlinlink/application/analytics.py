from __future__ import annotations

import atexit
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime
from threading import Lock
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from gremlinlink.store import BlockStore

logger = logging.getLogger(__name__)


class ClickInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: Literal["view", "redirect"] = "view"
    timestamp: Optional[datetime] = None
    user_agent: Optional[str] = Field(default=None, alias="userAgent")
    referrer: Optional[str] = None
    ip_address: Optional[str] = Field(default=None, alias="ipAddress")
    country: Optional[str] = Field(default=None, max_length=2)


class ClickRecorder:
    """
    Fire-and-forget click recording.

    `record` hands the write to a small thread pool and returns at once.
    It never raises: a broken event, a full pool or a dead store only
    produce a warning in the log.
    """

    def __init__(self, app=None, store_factory=BlockStore):
        self.store_factory = store_factory
        self.enabled = True
        self._app = None
        self._executor = None
        self._pending = set()
        self._lock = Lock()
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self._app = app
        self.enabled = app.config.get("ANALYTICS_ENABLED", True)
        self._executor = ThreadPoolExecutor(
            max_workers=app.config.get("ANALYTICS_WORKERS", 2),
            thread_name_prefix="click-recorder",
        )
        app.extensions["click_recorder"] = self
        atexit.register(self.shutdown)

    def record(self, block_id: str, event: Optional[Dict[str, Any]] = None) -> Optional[Future]:
        try:
            if not self.enabled or self._executor is None:
                return None

            click = ClickInput.model_validate(event or {})
            future = self._executor.submit(self._write, block_id, click)
            with self._lock:
                self._pending.add(future)
            future.add_done_callback(self._forget)
            return future
        except Exception:
            logger.warning("Click for block %s was not queued", block_id, exc_info=True)
            return None

    def _forget(self, future):
        with self._lock:
            self._pending.discard(future)

    def _write(self, block_id: str, click: ClickInput) -> None:
        try:
            with self._app.app_context():
                self.store_factory().record_click(
                    block_id,
                    event_type=click.type,
                    timestamp=click.timestamp,
                    referrer=click.referrer,
                    user_agent=click.user_agent,
                    ip_address=click.ip_address,
                    country=click.country,
                    metadata=click.model_dump(mode="json", exclude_none=True),
                )
        except Exception:
            logger.warning("Dropped %s click for block %s", click.type, block_id, exc_info=True)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for queued writes. Returns False if some are still running."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait_for_pending)
            self._executor = None
