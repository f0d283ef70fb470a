"""System endpoints for the Tribuna API."""

from __future__ import annotations

from fastapi import APIRouter
from sqlalchemy import text

from tribuna.api.v1.dependencies import SessionDep
from tribuna.core.settings import settings
from tribuna.schemas.common import ERROR_RESPONSES

router = APIRouter(prefix="/system", tags=["system"], responses=ERROR_RESPONSES)


@router.get("/version")
async def get_version() -> dict[str, str]:
    """Return the running application name and version."""
    return {"name": settings.app_name, "version": settings.app_version}


@router.get("/health")
async def get_health(db: SessionDep) -> dict[str, str]:
    """Report whether the database answers a trivial query."""
    db.execute(text("SELECT 1"))
    return {"status": "ok", "database": "ok"}
