"""
FastAPI application entry point for the portfolio backend.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio_backend.config import get_settings
from portfolio_backend.errors import register_exception_handlers
from portfolio_backend.routes import router


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Portfolio Backend", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
