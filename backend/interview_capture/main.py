from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import asyncio
import logging

from interview_capture import __version__
from interview_capture.api.schemas import HealthResponse
from interview_capture.api.ws_interview import router as interview_ws_router
from interview_capture.session.registry import session_registry
from interview_capture.system_metrics import get_metrics_snapshot
from core.config import CORS_ALLOW_ORIGINS, SESSION_INACTIVE_TTL_SEC

app = FastAPI(title="Interview Capture", version=__version__)
logger = logging.getLogger("interview_capture.main")


def _get_allowed_origins() -> list[str]:
    if not CORS_ALLOW_ORIGINS:
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    return [item.strip() for item in CORS_ALLOW_ORIGINS.split(",") if item.strip()]


app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

app.include_router(interview_ws_router)

_cleanup_task: asyncio.Task | None = None


async def _registry_cleanup_loop() -> None:
    while True:
        await asyncio.sleep(60)
        removed = session_registry.cleanup_inactive(ttl_sec=SESSION_INACTIVE_TTL_SEC)
        if removed:
            logger.info("Removed %s inactive capture connections", removed)


@app.on_event("startup")
async def _on_startup() -> None:
    global _cleanup_task
    _cleanup_task = asyncio.create_task(_registry_cleanup_loop())


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    global _cleanup_task
    if _cleanup_task is not None:
        _cleanup_task.cancel()
        await asyncio.gather(_cleanup_task, return_exceptions=True)
        _cleanup_task = None


@app.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    metrics = get_metrics_snapshot()
    return HealthResponse(
        status="ok",
        sessions_active=int(metrics.get("sessions_active", 0)),
        connections_active=session_registry.active_count(),
    )


@app.get("/api/metrics")
async def metrics() -> dict:
    return get_metrics_snapshot()
