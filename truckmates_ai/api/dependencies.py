"""FastAPI dependency providers."""
from __future__ import annotations

from fastapi import HTTPException, Request, status

from truckmates_ai.orchestrator.orchestrator import Orchestrator


def get_orchestrator(request: Request) -> Orchestrator:
    """Access the pre-built orchestrator from app.state."""
    orch = getattr(request.app.state, "orchestrator", None)
    if orch is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Orchestrator not initialised. Check server startup logs.",
        )
    return orch
