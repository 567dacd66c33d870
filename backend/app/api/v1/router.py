from fastapi import APIRouter
from app.api.v1.endpoints import media
from app.api.v1.endpoints.admin import admin_router

api_router = APIRouter()


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple health check endpoint for load balancer"""
    return {"status": "healthy", "service": "icms-admin-api"}


api_router.include_router(media.router, prefix="/media", tags=["Media"])

# Admin routes
api_router.include_router(admin_router)
