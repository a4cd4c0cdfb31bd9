"""API router configuration."""

from fastapi import APIRouter

from lifestack.modules.art.interfaces.router import router as art_router

api_router = APIRouter()

# Art rotation
api_router.include_router(art_router)
