"""FastAPI application entry point."""

import logging

from fastapi import FastAPI

from app import __version__
from app.api import diff, health
from app.config import settings

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(
    title="Object Diff Service",
    description="Schema-driven structural diffs for audit trails",
    version=__version__,
    debug=settings.debug,
)

app.include_router(health.router, tags=["health"])
app.include_router(diff.router, prefix="/diff", tags=["diff"])
