"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_list_centers():
    """Lazy import to avoid startup failures."""
    from ...data.centers_repository import list_centers
    return list_centers


@router.get("/health/catalog", status_code=status.HTTP_200_OK)
def health_catalog() -> dict:
    """Report how many centers the catalog currently yields."""
    centers = _get_list_centers()()
    located = sum(1 for center in centers if center.coordinates is not None)
    return {
        "service": "catalog",
        "healthy": bool(centers),
        "centers": len(centers),
        "centers_with_coordinates": located,
    }
