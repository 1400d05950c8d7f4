"""Liveness probe."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health", tags=["system"])
def health_check() -> dict:
    """Returns 200 while the process serves requests. Never touches the database."""
    return {"status": "ok"}
