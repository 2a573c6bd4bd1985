"""
Point-of-interest persistence (raw SQL).

A POI owns three kinds of child rows, all keyed by `pointinteret_id`:
contacts, services and prices. Writes that touch a POI and its children run
on a single connection inside one transaction (`db.transaction()`), so a
failing child insert rolls back the POI row as well.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

# Public column aliases used by the list endpoint.
POI_LIST_COLUMNS = """
          id,
          name AS nom,
          description,
          quartier_id,
          category_id AS "categorieId",
          adress,
          latitude,
          longitude,
          etoile AS rating,
          is_verify AS verified,
          status AS statut,
          is_booking AS "isBooking",
          is_restaurant AS "isRestaurant",
          is_transport AS "isTransport",
          is_stadium AS "isStadium",
          is_recommand AS "isRecommand",
          langue,
          is_translate AS "isTranslate",
          user_id
"""


class PoiWriteError(RuntimeError):
    pass


class _PoiMissing(Exception):
    pass


async def list_pois(*, langue: str, category_id: int | None = None) -> list[dict[str, Any]]:
    """
    List POIs for a language, optionally restricted to one category.
    """
    if category_id is None:
        return await db.fetch_all(
            f"""
            SELECT {POI_LIST_COLUMNS}
            FROM point_interests
            WHERE langue = $1
            ORDER BY id
            """,
            langue,
        )
    return await db.fetch_all(
        f"""
        SELECT {POI_LIST_COLUMNS}
        FROM point_interests
        WHERE langue = $1
          AND category_id = $2
        ORDER BY id
        """,
        langue,
        category_id,
    )


async def list_pois_with_details(*, langue: str) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT
          pi.*,
          c.name AS category_name,
          q.name AS quartier_name
        FROM point_interests pi
        LEFT JOIN categories c ON pi.category_id = c.id
        LEFT JOIN quartiers q ON pi.quartier_id = q.id
        WHERE pi.langue = $1
        ORDER BY pi.id
        """,
        langue,
    )


async def get_poi(poi_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT *
        FROM point_interests
        WHERE id = $1
        """,
        poi_id,
    )


async def poi_exists(poi_id: int) -> bool:
    row = await db.fetch_one(
        """
        SELECT 1 AS ok
        FROM point_interests
        WHERE id = $1
        LIMIT 1
        """,
        poi_id,
    )
    return row is not None


async def delete_poi(poi_id: int) -> dict[str, Any] | None:
    """
    Delete a POI. Child rows are removed by ON DELETE CASCADE.
    Returns the deleted id, or None when nothing matched.
    """
    return await db.fetch_one(
        """
        DELETE FROM point_interests
        WHERE id = $1
        RETURNING id
        """,
        poi_id,
    )


async def list_contacts(poi_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, email, tel, whatsapp, url, pointinteret_id, created_at, updated_at
        FROM contacts
        WHERE pointinteret_id = $1
        ORDER BY id
        """,
        poi_id,
    )


async def list_services(poi_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, name, description, amount, pointinteret_id, langue, created_at, updated_at
        FROM services
        WHERE pointinteret_id = $1
        ORDER BY id
        """,
        poi_id,
    )


async def list_prices(poi_id: int) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, price_name, amount, pointinteret_id, langue, created_at, updated_at
        FROM prices
        WHERE pointinteret_id = $1
        ORDER BY id
        """,
        poi_id,
    )


async def _insert_contact(conn: asyncpg.Connection, poi_id: int, contact: dict[str, Any]) -> None:
    await conn.execute(
        """
        INSERT INTO contacts (email, tel, whatsapp, url, pointinteret_id)
        VALUES ($1, $2, $3, $4, $5)
        """,
        contact.get("email"),
        contact.get("tel"),
        contact.get("whatsapp"),
        contact.get("url"),
        poi_id,
    )


async def _insert_services(conn: asyncpg.Connection, poi_id: int, services: list[dict[str, Any]]) -> None:
    if not services:
        return
    records = [
        (s["name"], s.get("description"), s["amount"], poi_id, s["langue"])
        for s in services
    ]
    await conn.executemany(
        """
        INSERT INTO services (name, description, amount, pointinteret_id, langue)
        VALUES ($1, $2, $3, $4, $5)
        """,
        records,
    )


async def _insert_prices(conn: asyncpg.Connection, poi_id: int, prices: list[dict[str, Any]]) -> None:
    if not prices:
        return
    records = [(p["price_name"], p["amount"], poi_id, p["langue"]) for p in prices]
    await conn.executemany(
        """
        INSERT INTO prices (price_name, amount, pointinteret_id, langue)
        VALUES ($1, $2, $3, $4)
        """,
        records,
    )


async def _update_prices(conn: asyncpg.Connection, poi_id: int, prices: list[dict[str, Any]]) -> None:
    if not prices:
        return
    # Scoped by pointinteret_id so a payload can't rewrite another POI's prices.
    records = [(p.get("price_name"), p["amount"], p["id"], poi_id) for p in prices]
    await conn.executemany(
        """
        UPDATE prices
        SET price_name = COALESCE($1, price_name),
            amount = COALESCE($2, amount),
            updated_at = now()
        WHERE id = $3
          AND pointinteret_id = $4
        """,
        records,
    )


async def insert_poi_with_children(
    *,
    poi: dict[str, Any],
    contact: dict[str, Any] | None,
    services: list[dict[str, Any]],
    prices: list[dict[str, Any]],
) -> int:
    """
    Insert a POI + its contact, services and prices in a single transaction.

    Returns the new POI id.
    """
    async with db.transaction() as conn:
        row = await conn.fetchrow(
            """
            INSERT INTO point_interests
              (name, adress, quartier_id, category_id, description, latitude, longitude,
               user_id, etoile, status, is_booking, is_restaurant, is_transport,
               is_stadium, is_recommand, langue)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16)
            RETURNING id
            """,
            poi["name"],
            poi.get("adress"),
            poi.get("quartier_id"),
            poi.get("category_id"),
            poi.get("description"),
            poi.get("latitude"),
            poi.get("longitude"),
            poi.get("user_id"),
            poi.get("etoile"),
            poi["status"],
            poi["is_booking"],
            poi["is_restaurant"],
            poi["is_transport"],
            poi["is_stadium"],
            poi["is_recommand"],
            poi["langue"],
        )
        if row is None or "id" not in row:
            raise PoiWriteError("Failed to insert POI.")

        poi_id = int(row["id"])

        if contact is not None:
            await _insert_contact(conn, poi_id, contact)
        await _insert_services(conn, poi_id, services)
        await _insert_prices(conn, poi_id, prices)

        return poi_id


async def update_poi_with_children(
    poi_id: int,
    *,
    poi: dict[str, Any],
    contact: dict[str, Any] | None = None,
    replace_contact: bool = False,
    services: list[dict[str, Any]] | None = None,
    prices: list[dict[str, Any]] | None = None,
) -> bool:
    """
    Update a POI and its children in a single transaction.

    - `replace_contact`: drop existing contacts, then insert `contact` if given.
    - `services`: when not None, replaces the POI's services.
    - `prices`: rows with an `id` are updated in place, the rest are inserted.

    Returns False, with the transaction rolled back, when the POI does not exist.
    """
    try:
        async with db.transaction() as conn:
            row = await conn.fetchrow(
                """
                UPDATE point_interests
                SET name = $1,
                    adress = $2,
                    quartier_id = $3,
                    category_id = $4,
                    description = $5,
                    latitude = $6,
                    longitude = $7,
                    user_id = $8,
                    updated_at = now()
                WHERE id = $9
                RETURNING id
                """,
                poi["name"],
                poi.get("adress"),
                poi.get("quartier_id"),
                poi.get("category_id"),
                poi.get("description"),
                poi.get("latitude"),
                poi.get("longitude"),
                poi.get("user_id"),
                poi_id,
            )
            if row is None:
                raise _PoiMissing(poi_id)

            if replace_contact:
                await conn.execute("DELETE FROM contacts WHERE pointinteret_id = $1", poi_id)
                if contact is not None:
                    await _insert_contact(conn, poi_id, contact)

            if services is not None:
                await conn.execute("DELETE FROM services WHERE pointinteret_id = $1", poi_id)
                await _insert_services(conn, poi_id, services)

            if prices:
                await _update_prices(conn, poi_id, [p for p in prices if p.get("id") is not None])
                await _insert_prices(conn, poi_id, [p for p in prices if p.get("id") is None])
    except _PoiMissing:
        return False
    return True
