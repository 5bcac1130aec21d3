from __future__ import annotations

from decimal import Decimal
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class RoomType(BaseModel):
    """
    One room category inside a listing's inventory collection.

    Stored in ``listings.rooms`` using the same camelCase keys it has on the
    wire. Invariant: ``0 <= available <= total_count``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    type: str = Field(
        ..., min_length=1, max_length=50, description="Room type name, matched exactly"
    )
    total_count: int = Field(..., ge=0, description="Physical capacity")
    available: int = Field(..., description="Unreserved capacity")
    price_minor: int = Field(0, ge=0, description="Price in minor currency units")
    deposit_minor: int = Field(0, ge=0, description="Deposit in minor currency units")
    is_ac: bool = Field(False, alias="isAC", description="Air conditioned")

    @model_validator(mode="after")
    def check_capacity(self) -> "RoomType":
        if not 0 <= self.available <= self.total_count:
            raise ValueError(
                f"available={self.available} outside 0..{self.total_count} for {self.type!r}"
            )
        return self


def parse_rooms(raw: Iterable[dict[str, Any]] | None) -> list[RoomType]:
    """Load a stored rooms collection into typed records, preserving order."""
    return [RoomType.model_validate(item) for item in raw or []]


def dump_rooms(rooms: Iterable[RoomType]) -> list[dict[str, Any]]:
    """Serialize typed records back to the stored JSON shape."""
    return [room.model_dump(by_alias=True) for room in rooms]


class ListingInventory(BaseModel):
    """Current inventory and derived rating of one listing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    listing_id: int
    title: str
    rooms: list[RoomType]
    rooms_version: int
    rating: Decimal
    rating_count: int
