from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from orangeslice.services.api.deps import get_context
from orangeslice.services.catalog.page import build_catalog_page
from orangeslice.services.context import AppContext
from orangeslice.services.schemas import CatalogPage

router = APIRouter(tags=["catalog"])


def _catalog(ctx: AppContext, q: Optional[str], tag: List[UUID]) -> CatalogPage:
    ctx.mirror.ensure_subscribed()
    return build_catalog_page(
        ctx.mirror.snapshot(),
        q,
        tag,
        placeholder_image_url=ctx.settings.catalog.placeholder_image_url,
    )


@router.get("/", response_model=CatalogPage)
def catalog_home(
    q: Optional[str] = Query(None, description="Case-insensitive search on the project name"),
    tag: List[UUID] = Query(default=[], description="Tag ids; an entry must carry every one"),
    ctx: AppContext = Depends(get_context),
) -> CatalogPage:
    return _catalog(ctx, q, tag)


@router.get("/demos", response_model=CatalogPage)
def catalog_demos(
    q: Optional[str] = Query(None),
    tag: List[UUID] = Query(default=[]),
    ctx: AppContext = Depends(get_context),
) -> CatalogPage:
    return _catalog(ctx, q, tag)
