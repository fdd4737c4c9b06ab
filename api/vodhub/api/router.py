"""API router composition for all route groups."""

from fastapi import APIRouter

from .routes import auth, match, playback, providers

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(match.router, prefix="/match", tags=["match"])
api_router.include_router(providers.router, prefix="/providers", tags=["providers"])
api_router.include_router(playback.router, prefix="/playback", tags=["playback"])
