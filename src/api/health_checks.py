from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import container_dependency
from src.infrastructure.container.dependency_injection import DependencyContainer

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def get_health_status(container: DependencyContainer = Depends(container_dependency)):
    """
    Endpoint to get the health status of the application.
    """
    database = container.db_manager.health_check()
    healthy = database.get("status") == "healthy"
    body = {
        "status": "ok" if healthy else "degraded",
        "environment": container.config.environment,
        "database": database,
    }
    return JSONResponse(status_code=200 if healthy else 503, content=body)


@router.get("/")
async def root():
    """Root endpoint"""
    return {"message": "Kingsman storefront backend is running", "status": "active"}
