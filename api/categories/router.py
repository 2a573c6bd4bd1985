"""
Category API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from core import settings

from . import repository

router = APIRouter()


@router.get("/categories")
async def list_categories(
    langue: str | None = Query(default=None, min_length=2, max_length=10),
) -> list[dict]:
    return await repository.list_categories(langue=langue or settings.default_language())
