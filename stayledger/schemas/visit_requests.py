from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class VisitRequestPayload(BaseModel):
    """
    Schema for requesting a viewing. Re-requesting while a request for the
    same user and listing is still pending reschedules that request.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_email: str = Field(..., min_length=3, max_length=255)
    user_name: Optional[str] = Field(None, max_length=255)
    listing_id: int
    owner_email: Optional[str] = Field(None, max_length=255)
    visit_date: date
    visit_time: str = Field(..., min_length=1, max_length=20, description="e.g. 10:30 AM")


class VisitRequestRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_email: str
    user_name: Optional[str] = None
    listing_id: int
    owner_email: Optional[str] = None
    visit_date: date
    visit_time: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
