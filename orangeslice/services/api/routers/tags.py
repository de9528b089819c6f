from __future__ import annotations

from http import HTTPStatus
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from orangeslice.common.settings import get_settings
from orangeslice.domain.errors import GatewayError
from orangeslice.services.api.deps import get_context
from orangeslice.services.context import AppContext
from orangeslice.services.schemas import TagRead

cfg = get_settings()
router = APIRouter(prefix=f"{cfg.api.prefix}/tags", tags=["tags"])


@router.get("", response_model=List[TagRead])
def list_tags(ctx: AppContext = Depends(get_context)) -> List[TagRead]:
    try:
        return [TagRead.model_validate(t) for t in ctx.gateway.tags.list()]
    except GatewayError as e:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(e))
