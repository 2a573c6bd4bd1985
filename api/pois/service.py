"""
Point-of-interest business logic.

Scope:
- fill child-row defaults (names, amounts, language) before they reach SQL
- map missing rows to 404 and failed transactional writes to 500
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from fastapi import HTTPException, status

from core import errors, settings

from . import repository, schemas

logger = logging.getLogger(__name__)

POI_NOT_FOUND = "POI not found"

POI_BASE_FIELDS = (
    "name",
    "adress",
    "quartier_id",
    "category_id",
    "description",
    "latitude",
    "longitude",
    "user_id",
)

POI_CREATE_FIELDS = POI_BASE_FIELDS + (
    "etoile",
    "status",
    "is_booking",
    "is_restaurant",
    "is_transport",
    "is_stadium",
    "is_recommand",
    "langue",
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=POI_NOT_FOUND)


def _write_failed(exc: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": errors.INTERNAL_ERROR, "details": errors.error_details(exc)},
    )


def _amount(value: Decimal | None) -> Decimal:
    return value if value is not None else Decimal(0)


def _contact_row(contact: schemas.ContactIn) -> dict[str, Any]:
    # Empty strings are stored as NULL.
    return {
        "email": contact.email or None,
        "tel": contact.tel or None,
        "whatsapp": contact.whatsapp or None,
        "url": contact.url or None,
    }


def _service_row(service: schemas.ServiceIn, *, default_langue: str) -> dict[str, Any]:
    return {
        "name": service.name or schemas.UNNAMED_SERVICE,
        "description": service.description or None,
        "amount": _amount(service.amount),
        "langue": service.langue or default_langue,
    }


def _price_row(price: schemas.PriceIn, *, default_langue: str, keep_id: bool) -> dict[str, Any]:
    row: dict[str, Any] = {"langue": price.langue or default_langue}
    if keep_id and price.id is not None:
        # None keeps the stored value.
        row["id"] = price.id
        row["price_name"] = price.price_name or None
        row["amount"] = price.amount
    else:
        row["price_name"] = price.price_name or schemas.UNNAMED_PRICE
        row["amount"] = _amount(price.amount)
    return row


async def list_pois(*, category_id: int | None = None) -> list[dict[str, Any]]:
    return await repository.list_pois(langue=settings.default_language(), category_id=category_id)


async def list_pois_with_details() -> list[dict[str, Any]]:
    return await repository.list_pois_with_details(langue=settings.default_language())


async def get_poi(poi_id: int) -> dict[str, Any]:
    row = await repository.get_poi(poi_id)
    if row is None:
        raise _not_found()
    return row


async def create_poi(payload: schemas.PoiCreate) -> schemas.PoiWriteResponse:
    default_langue = settings.default_language()
    poi = payload.model_dump(include=set(POI_CREATE_FIELDS))
    contact = _contact_row(payload.contacts) if payload.contacts is not None else None
    services = [_service_row(s, default_langue=default_langue) for s in payload.services]
    # Prices are always new rows on create.
    prices = [_price_row(p, default_langue=default_langue, keep_id=False) for p in payload.prices]

    try:
        poi_id = await repository.insert_poi_with_children(
            poi=poi,
            contact=contact,
            services=services,
            prices=prices,
        )
    except Exception as exc:
        logger.exception("poi_create_failed name=%s", payload.name)
        raise _write_failed(exc) from exc

    logger.info(
        "poi_created poi_id=%s contact=%s services=%s prices=%s",
        poi_id,
        contact is not None,
        len(services),
        len(prices),
    )
    return schemas.PoiWriteResponse(message="POI created successfully", poiId=poi_id)


async def update_poi(poi_id: int, payload: schemas.PoiUpdate) -> schemas.PoiWriteResponse:
    default_langue = settings.default_language()
    poi = payload.model_dump(include=set(POI_BASE_FIELDS))

    replace_contact = payload.contacts is not None
    contact = None
    if payload.contacts is not None and payload.contacts.has_any():
        contact = _contact_row(payload.contacts)

    services = None
    if payload.services is not None:
        # Services without a name are skipped on update.
        services = [
            _service_row(s, default_langue=default_langue)
            for s in payload.services
            if s.name
        ]

    prices = None
    if payload.prices:
        prices = [_price_row(p, default_langue=default_langue, keep_id=True) for p in payload.prices]

    try:
        updated = await repository.update_poi_with_children(
            poi_id,
            poi=poi,
            contact=contact,
            replace_contact=replace_contact,
            services=services,
            prices=prices,
        )
    except Exception as exc:
        logger.exception("poi_update_failed poi_id=%s", poi_id)
        raise _write_failed(exc) from exc

    if not updated:
        raise _not_found()

    logger.info(
        "poi_updated poi_id=%s contact_replaced=%s services=%s prices=%s",
        poi_id,
        replace_contact,
        "unchanged" if services is None else len(services),
        0 if prices is None else len(prices),
    )
    return schemas.PoiWriteResponse(message="POI updated successfully", poiId=poi_id)


async def delete_poi(poi_id: int) -> schemas.MessageResponse:
    row = await repository.delete_poi(poi_id)
    if row is None:
        raise _not_found()
    logger.info("poi_deleted poi_id=%s", poi_id)
    return schemas.MessageResponse(message="POI deleted successfully")


async def _require_poi(poi_id: int) -> None:
    if not await repository.poi_exists(poi_id):
        raise _not_found()


async def list_contacts(poi_id: int) -> list[dict[str, Any]]:
    await _require_poi(poi_id)
    return await repository.list_contacts(poi_id)


async def list_services(poi_id: int) -> list[dict[str, Any]]:
    await _require_poi(poi_id)
    return await repository.list_services(poi_id)


async def list_prices(poi_id: int) -> list[dict[str, Any]]:
    await _require_poi(poi_id)
    return await repository.list_prices(poi_id)
