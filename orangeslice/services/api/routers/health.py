# orangeslice/services/api/routers/health.py
from __future__ import annotations
from fastapi import APIRouter, Depends

from orangeslice.services.api.deps import get_context
from orangeslice.services.context import AppContext

router = APIRouter()

@router.get("/healthz")
def healthz(ctx: AppContext = Depends(get_context)):
    s = ctx.settings
    return {
        "ok": True,
        "app": s.app_name,
        "env": s.app_env,
        "mirror_loaded": ctx.mirror.loaded,
        "dead_channels": [k.value for k in ctx.mirror.dead_channels()] if ctx.started else [],
    }
