from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI

    from leave_engine.config import Settings

# Dev actor headers read by api.deps.
ACTOR_HEADERS = ("X-User-Id", "X-Role")


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure CORS for the admin front end."""
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", *ACTOR_HEADERS],
        # CSV exports are served as attachments.
        expose_headers=["Content-Disposition"],
    )
