"""Liveness probe."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health_check() -> dict[str, str]:
    """Return 200 while the process is serving requests."""
    return {"status": "ok", "message": "Server is running"}
