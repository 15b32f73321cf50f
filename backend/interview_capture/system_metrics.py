import threading
import time
from typing import Any


_lock = threading.Lock()
_started_at = time.time()
_metrics: dict[str, float] = {
    "sessions_active": 0.0,
    "sessions_started_total": 0.0,
    "sessions_stopped_total": 0.0,
    "start_failed_capability_unsupported": 0.0,
    "start_failed_permission_denied": 0.0,
    "start_failed_device_unavailable": 0.0,
    "answers_auto_advance_total": 0.0,
    "answers_manual_total": 0.0,
    "adapter_errors_total": 0.0,
    "ws_connections_active": 0.0,
}


def increment_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        _metrics[key] = float(_metrics.get(key, 0.0)) + float(amount)


def decrement_metric(name: str, amount: float = 1.0) -> None:
    key = str(name or "").strip()
    if not key:
        return
    with _lock:
        next_value = float(_metrics.get(key, 0.0)) - float(amount)
        _metrics[key] = max(0.0, next_value)


def record_start_failure(code: str) -> None:
    increment_metric(f"start_failed_{str(code or 'other').strip().lower()}")


def get_metrics_snapshot() -> dict[str, Any]:
    with _lock:
        snapshot: dict[str, Any] = dict(_metrics)
    snapshot["uptime_sec"] = round(time.time() - _started_at, 3)
    return snapshot
