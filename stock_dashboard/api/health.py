from fastapi import APIRouter, Depends

from stock_dashboard.state import DashboardState, get_dashboard

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check that the record store is reachable and the dashboard is subscribed to it."
)
def readiness_check(dashboard: DashboardState = Depends(get_dashboard)):
    """
    Readiness check.

    Returns status of:
    - Record store connection
    - Store change subscription
    """
    checks = {
        "store": dashboard.store.ping(),
        "subscribed": dashboard.loader.subscribed,
    }

    return {
        "status": "ready" if all(checks.values()) else "not_ready",
        "checks": checks,
        "snapshot_version": dashboard.snapshot.version,
    }
