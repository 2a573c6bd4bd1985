"""
Pydantic schemas for point-of-interest endpoints.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from core import settings

UNNAMED_SERVICE = "Unnamed service"
UNNAMED_PRICE = "Unnamed price"


class ContactIn(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    tel: str | None = Field(default=None, max_length=50)
    whatsapp: str | None = Field(default=None, max_length=50)
    url: str | None = Field(default=None, max_length=2048)

    def has_any(self) -> bool:
        return any((self.email, self.tel, self.whatsapp, self.url))


class ServiceIn(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    amount: Decimal | None = Decimal(0)
    langue: str | None = Field(default=None, max_length=10)


class PriceIn(BaseModel):
    # Set on update to modify an existing price instead of adding one.
    id: int | None = Field(default=None, ge=1)
    price_name: str | None = Field(default=None, max_length=255)
    # Missing on update keeps the stored amount; missing on insert stores 0.
    amount: Decimal | None = None
    langue: str | None = Field(default=None, max_length=10)


class PoiBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    adress: str | None = Field(default=None, max_length=500)
    quartier_id: int | None = None
    category_id: int | None = None
    description: str | None = None
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)
    user_id: int | None = None


class PoiCreate(PoiBase):
    etoile: int | None = Field(default=None, ge=0, le=5)
    status: int = 1
    is_booking: bool = False
    is_restaurant: bool = False
    is_transport: bool = False
    is_stadium: bool = False
    is_recommand: bool = False
    langue: str = Field(default_factory=settings.default_language, max_length=10)
    contacts: ContactIn | None = None
    services: list[ServiceIn] = Field(default_factory=list)
    prices: list[PriceIn] = Field(default_factory=list)


class PoiUpdate(PoiBase):
    """
    Child collections left out of the payload are not touched.
    """

    contacts: ContactIn | None = None
    services: list[ServiceIn] | None = None
    prices: list[PriceIn] | None = None


class PoiWriteResponse(BaseModel):
    message: str
    poiId: int


class MessageResponse(BaseModel):
    message: str
