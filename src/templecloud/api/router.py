"""Master API router mounted at /api/v1."""

from fastapi import APIRouter

from templecloud.api.routes import events, health, prayer_services, public, temples, uploads

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(temples.router)
api_router.include_router(events.router)
api_router.include_router(prayer_services.router)
api_router.include_router(public.router)
api_router.include_router(uploads.router)
