from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import documents, health
from .core.config import settings

logger = logging.getLogger("docmark.api")
logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s %(message)s")

app = FastAPI(title="Markup documentation renderer")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router, prefix="/api")
app.include_router(documents.router, prefix="/api")

logger.info("%s started (%s)", settings.app_name, settings.environment)


__all__ = ["app"]
