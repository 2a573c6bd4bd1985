"""
Category persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_categories(*, langue: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT *
        FROM categories
        WHERE langue = $1
        ORDER BY id
        """,
        langue,
    )
