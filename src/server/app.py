"""FastAPI application bootstrap."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import register_task_routes


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="Task Tracker API", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_task_routes(app)

    return app


app = create_app()
