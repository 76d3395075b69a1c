"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_database
from finance_tracker.models.base import Database

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(database: Database = Depends(get_database)):
    """
    Return application health status including database connectivity.

    The database check executes a simple query to verify
    the connection is alive.
    """
    db_status = "healthy" if database.is_healthy() else "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "personal-finance-tracker",
        "database": db_status,
    }
