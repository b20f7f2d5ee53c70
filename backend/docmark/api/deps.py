"""Common dependency functions for API routes."""

from typing import AsyncIterator

import httpx

from docmark.core.config import Settings, get_settings


def get_app_settings() -> Settings:
    return get_settings()


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.fetch_timeout, follow_redirects=True) as client:
        yield client
