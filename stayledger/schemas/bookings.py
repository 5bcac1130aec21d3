from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_camel = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingConfirmPayload(BaseModel):
    """
    Schema for a validated "payment succeeded" fact from the payment flow.
    """

    model_config = _camel

    name: str = Field(..., min_length=1, max_length=255, description="Guest name")
    email: Optional[str] = Field(None, max_length=255, description="Guest email")
    mobile: Optional[str] = Field(None, max_length=20, description="Guest mobile number")
    listing_id: int = Field(..., description="Listing being booked")
    room_type: str = Field(
        ..., min_length=1, max_length=50, description="RoomType name on the listing"
    )
    amount_minor: int = Field(..., ge=0, description="Amount paid in minor currency units")
    booking_ref: Optional[str] = Field(
        None, max_length=100, description="Payment reference; generated when absent"
    )
    move_in_date: Optional[date] = Field(None, description="Defaults to the payment date")


class MoveInDatePayload(BaseModel):
    model_config = _camel

    move_in_date: date = Field(..., description="New move-in date")


class RoomAssignmentPayload(BaseModel):
    """Owner-assigned physical room for a guest. Omitted fields are left unchanged."""

    model_config = _camel

    room_no: Optional[str] = Field(None, max_length=50)
    floor: Optional[str] = Field(None, max_length=50)


class BookingRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    listing_id: int
    name: str
    email: Optional[str] = None
    mobile: Optional[str] = None
    room_type: str
    room_no: Optional[str] = None
    floor: Optional[str] = None
    status: str
    booking_ref: str
    amount_minor: int
    move_in_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class CancelResult(BaseModel):
    success: bool = True


class ListingSummary(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    owner_email: Optional[str] = None
    rating: Decimal
    rating_count: int


class UserStay(BaseModel):
    """Latest booking of a guest together with the listing it belongs to."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    has_stay: bool
    booking: Optional[BookingRecord] = None
    listing: Optional[ListingSummary] = None
