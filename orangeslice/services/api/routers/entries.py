from __future__ import annotations

from http import HTTPStatus
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from orangeslice.common.settings import get_settings
from orangeslice.domain.errors import GatewayError
from orangeslice.services.api.deps import get_context
from orangeslice.services.catalog.entries import entries_with_tags
from orangeslice.services.context import AppContext
from orangeslice.services.schemas import EntryWithTagsRead

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/entries", tags=["entries"])


@router.get("", response_model=List[EntryWithTagsRead])
def list_entries(ctx: AppContext = Depends(get_context)) -> List[EntryWithTagsRead]:
    try:
        return entries_with_tags(ctx.gateway)
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))


@router.get("/{entry_id}", response_model=EntryWithTagsRead)
def get_entry(entry_id: UUID, ctx: AppContext = Depends(get_context)) -> EntryWithTagsRead:
    try:
        found = entries_with_tags(ctx.gateway, entry_id)
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
    if not found:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Entry not found")
    return found[0]
