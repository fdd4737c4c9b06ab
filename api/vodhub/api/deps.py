from fastapi import Cookie, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from vodhub.core.security import is_valid_session
from vodhub.db.session import get_session
from vodhub.matching.adapter import ProviderQueryAdapter
from vodhub.matching.orchestrator import MatchOrchestrator
from vodhub.matching.playback import PlaybackResolver
from vodhub.services.provider_service import DatabaseProviderRegistry

SESSION_COOKIE_NAME = "admin_session"


async def get_db() -> AsyncSession:
    async for session in get_session():
        yield session


def get_provider_adapter() -> ProviderQueryAdapter:
    return ProviderQueryAdapter()


def get_playback_resolver() -> PlaybackResolver:
    return PlaybackResolver()


async def get_orchestrator(
    session: AsyncSession = Depends(get_db),
    adapter: ProviderQueryAdapter = Depends(get_provider_adapter),
) -> MatchOrchestrator:
    return MatchOrchestrator(DatabaseProviderRegistry(session), adapter)


def is_admin(admin_session: str | None = Cookie(default=None, alias=SESSION_COOKIE_NAME)) -> bool:
    return is_valid_session(admin_session)


def require_admin(authenticated: bool = Depends(is_admin)) -> None:
    if not authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Operator session required")
