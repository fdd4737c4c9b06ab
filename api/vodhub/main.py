"""FastAPI application entrypoint and health reporting utilities.

Invariants:
- Provider telemetry is only exposed to operator sessions.
"""

import logging
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vodhub.api.deps import is_admin
from vodhub.api.router import api_router
from vodhub.core.config import settings
from vodhub.db.session import init_models
from vodhub.matching.observability import provider_monitor

LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix=settings.api_prefix)


def _configure_logging() -> None:
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)


@app.on_event("startup")
async def _startup() -> None:
    """Configure logging and create missing tables."""
    _configure_logging()
    await init_models()
    logging.getLogger("vodhub.main").info("%s started (%s)", settings.app_name, settings.environment)


def _summarize_providers(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Condense monitor state into health-friendly telemetry."""
    issues: list[dict[str, Any]] = []
    providers: dict[str, Any] = {}
    for provider, payload in snapshot.items():
        operations = payload.get("operations", {})
        for operation, metrics in operations.items():
            if metrics.get("last_error"):
                issues.append(
                    {
                        "provider": provider,
                        "operation": operation,
                        "reason": "last_error",
                        "error": metrics["last_error"],
                        "failure_streak": metrics.get("failure_streak", 0),
                    }
                )
        providers[provider] = {
            "state": "degraded" if payload.get("degraded") else "ok",
            "operations": operations,
        }
    return {"providers": providers, "issues": issues}


@app.get("/health", tags=["internal"])
@app.get(f"{settings.api_prefix}/health", tags=["internal"])
async def health(authenticated: bool = Depends(is_admin)) -> dict[str, Any]:
    """Return health status and, for operators, per-provider telemetry."""
    if not authenticated:
        return {"status": "ok"}

    snapshot = await provider_monitor.snapshot()
    telemetry = _summarize_providers(snapshot)
    degraded = any(entry["state"] == "degraded" for entry in telemetry["providers"].values())
    return {"status": "degraded" if degraded else "ok", "telemetry": telemetry}
