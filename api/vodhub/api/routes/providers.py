from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from vodhub.api.deps import get_db, require_admin
from vodhub.schema.provider import (
    ProviderBulkSave,
    ProviderEnabledUpdate,
    ProviderListing,
    ProviderRead,
    ProviderSelectionUpdate,
    ProviderUpsert,
)
from vodhub.services import provider_service
from vodhub.services.provider_service import ProviderNotFoundError

router = APIRouter()


@router.get("", response_model=ProviderListing)
async def list_providers(session: AsyncSession = Depends(get_db)) -> ProviderListing:
    providers = await provider_service.list_enabled_providers(session)
    selected = await provider_service.get_selected_provider(session)
    return ProviderListing(
        providers=[ProviderRead.model_validate(provider) for provider in providers],
        selected=ProviderRead.model_validate(selected) if selected else None,
    )


@router.get("/all", response_model=list[ProviderRead], dependencies=[Depends(require_admin)])
async def list_all_providers(session: AsyncSession = Depends(get_db)) -> list[ProviderRead]:
    providers = await provider_service.list_all_providers(session)
    return [ProviderRead.model_validate(provider) for provider in providers]


@router.post("", response_model=list[ProviderRead], dependencies=[Depends(require_admin)])
async def save_providers(payload: ProviderBulkSave, session: AsyncSession = Depends(get_db)) -> list[ProviderRead]:
    try:
        providers = await provider_service.replace_providers(session, payload.providers, payload.selected)
    except (ProviderNotFoundError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [ProviderRead.model_validate(provider) for provider in providers]


@router.put("/selected", response_model=ProviderRead, dependencies=[Depends(require_admin)])
async def update_selected_provider(
    payload: ProviderSelectionUpdate, session: AsyncSession = Depends(get_db)
) -> ProviderRead:
    try:
        provider = await provider_service.set_selected_provider(session, payload.selected)
    except ProviderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ProviderRead.model_validate(provider)


@router.put("/{key}", response_model=ProviderRead, dependencies=[Depends(require_admin)])
async def upsert_provider(key: str, payload: ProviderUpsert, session: AsyncSession = Depends(get_db)) -> ProviderRead:
    try:
        provider = await provider_service.upsert_provider(session, key, payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProviderRead.model_validate(provider)


@router.patch("/{key}/enabled", response_model=ProviderRead, dependencies=[Depends(require_admin)])
async def toggle_provider(
    key: str, payload: ProviderEnabledUpdate, session: AsyncSession = Depends(get_db)
) -> ProviderRead:
    try:
        provider = await provider_service.set_provider_enabled(session, key, payload.enabled)
    except ProviderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return ProviderRead.model_validate(provider)


@router.delete(
    "/{key}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    dependencies=[Depends(require_admin)],
)
async def delete_provider(key: str, session: AsyncSession = Depends(get_db)) -> None:
    try:
        await provider_service.delete_provider(session, key)
    except ProviderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
