from gremlinlink.application.analytics import ClickRecorder
from gremlinlink.application.reports import block_analytics
from gremlinlink.models import ClickEvent


class ExplodingStore:
    def record_click(self, block_id, **kwargs):
        raise RuntimeError("analytics backend down")


def test_record_writes_click(db, make_block, recorder):
    block = make_block("docs", renderer="redirect", data={"url": "https://example.com"})

    future = recorder.record(block.id, {"type": "redirect", "ipAddress": "198.51.100.1"})

    assert future is not None
    assert recorder.flush(timeout=5)
    click = db.session.query(ClickEvent).one()
    assert click.ip_address == "198.51.100.1"
    assert click.type == "redirect"


def test_invalid_event_is_dropped_without_raising(db, make_block, recorder):
    block = make_block("docs")

    assert recorder.record(block.id, {"type": "purchase"}) is None
    assert db.session.query(ClickEvent).count() == 0


def test_store_failure_is_swallowed(app, db, make_block):
    block = make_block("docs")
    recorder = ClickRecorder(app, store_factory=ExplodingStore)

    try:
        future = recorder.record(block.id, {"type": "view"})
        assert recorder.flush(timeout=5)
        assert future.exception() is None
    finally:
        recorder.shutdown()


def test_disabled_recorder_records_nothing(app, make_block):
    app.config["ANALYTICS_ENABLED"] = False
    recorder = ClickRecorder(app)

    try:
        assert recorder.record(make_block("docs").id) is None
    finally:
        recorder.shutdown()


def test_clicks_for_unknown_blocks_are_dropped(db, recorder):
    recorder.record("no-such-block", {"type": "view"})

    assert recorder.flush(timeout=5)
    assert db.session.query(ClickEvent).count() == 0


def test_block_analytics_window(make_block, recorder):
    block = make_block("docs")
    recorder.record(block.id, {"type": "view"})
    recorder.flush(timeout=5)

    summary = block_analytics(block_id=block.id, days=30)

    assert summary["total_clicks"] == 1
    assert summary["days"] == 30
    assert len(summary["daily_stats"]) == 1
