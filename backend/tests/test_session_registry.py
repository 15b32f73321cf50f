import time

from interview_capture.session.registry import SessionRegistry


def test_session_registry_register_touch_inactive_cleanup():
    registry = SessionRegistry()

    registry.register("c1")
    item = registry.get("c1")
    assert item is not None
    assert item["active"] is True
    assert item["capture_session"] is None

    marker = object()
    registry.bind("c1", marker)
    assert registry.get("c1")["capture_session"] is marker

    before_touch = float(item["updated_at"])
    time.sleep(0.01)
    registry.touch("c1")
    after_touch = float(registry.get("c1")["updated_at"])
    assert after_touch >= before_touch
    assert registry.active_count() == 1

    registry.mark_inactive("c1")
    assert registry.get("c1")["active"] is False
    assert registry.get("c1")["capture_session"] is None
    assert registry.active_count() == 0

    # ttl clamps internally to >=30s; force an old timestamp
    registry._sessions["c1"]["updated_at"] = time.time() - 3600
    removed = registry.cleanup_inactive(ttl_sec=0)
    assert removed == 1
    assert registry.get("c1") is None


def test_session_registry_keeps_active_entries():
    registry = SessionRegistry()
    registry.register("c2")
    registry._sessions["c2"]["updated_at"] = time.time() - 3600

    assert registry.cleanup_inactive(ttl_sec=0) == 0
    assert registry.get("c2") is not None
