"""API router -- aggregates all endpoint routers under /api."""

from fastapi import APIRouter

from vibe_awards.api import apps, auth, battles, collaboration, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(apps.router, prefix="/apps", tags=["apps"])
api_router.include_router(battles.router, prefix="/battles", tags=["battles"])
api_router.include_router(collaboration.router, prefix="/collaboration", tags=["collaboration"])
