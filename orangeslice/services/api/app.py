from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orangeslice.common.settings import Settings, get_settings
from orangeslice.services.api.routers import admin, catalog, entries, health, tags
from orangeslice.services.context import AppContext


def create_app(ctx: Optional[AppContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI app. When `ctx` is given the caller owns its lifecycle
    (tests); otherwise the lifespan creates one at startup and closes it at exit.
    """
    cfg = ctx.settings if ctx is not None else (settings or get_settings())
    dev = cfg.app_env.lower() == "development"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context = ctx or AppContext.create(cfg)
        context.start()
        app.state.ctx = context
        try:
            yield
        finally:
            if ctx is None:
                context.close()

    app = FastAPI(
        title="OrangeSlice API",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
        lifespan=lifespan,
    )

    allow_origins = ["*"] if dev else cfg.api.cors_allow_origins
    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
    )

    # Routers
    app.include_router(health.router)
    app.include_router(catalog.router)
    app.include_router(entries.router)
    app.include_router(tags.router)
    app.include_router(admin.page_router)
    app.include_router(admin.router)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    cfg = get_settings()
    uvicorn.run(
        "orangeslice.services.api.app:app",
        host=cfg.api.host,
        port=cfg.api.port,
        log_level=cfg.log_level.lower(),
    )
