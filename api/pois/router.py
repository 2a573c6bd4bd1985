"""
Point-of-interest API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from . import schemas, service

router = APIRouter()


@router.get("/pois")
async def list_pois(
    category: int | None = Query(default=None, ge=1),
) -> list[dict]:
    return await service.list_pois(category_id=category)


@router.get("/pois-with-details")
async def list_pois_with_details() -> list[dict]:
    """
    POIs with their category and quartier names joined in.
    """
    return await service.list_pois_with_details()


@router.post("/poi", status_code=status.HTTP_201_CREATED)
async def create_poi(request: schemas.PoiCreate) -> schemas.PoiWriteResponse:
    """
    Create a POI together with its contact, services and prices.
    Either everything is stored or nothing is.
    """
    return await service.create_poi(request)


@router.get("/pois/{poi_id}")
async def get_poi(poi_id: int) -> dict:
    return await service.get_poi(poi_id)


@router.put("/pois/{poi_id}")
async def update_poi(poi_id: int, request: schemas.PoiUpdate) -> schemas.PoiWriteResponse:
    """
    Update a POI and replace the child collections present in the payload.
    """
    return await service.update_poi(poi_id, request)


@router.delete("/pois/{poi_id}")
async def delete_poi(poi_id: int) -> schemas.MessageResponse:
    return await service.delete_poi(poi_id)


@router.get("/pois/{poi_id}/contacts")
async def list_contacts(poi_id: int) -> list[dict]:
    return await service.list_contacts(poi_id)


@router.get("/pois/{poi_id}/services")
async def list_services(poi_id: int) -> list[dict]:
    return await service.list_services(poi_id)


@router.get("/pois/{poi_id}/prices")
async def list_prices(poi_id: int) -> list[dict]:
    return await service.list_prices(poi_id)
