from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReviewCreatePayload(BaseModel):
    """
    Schema for submitting a review. ``rating`` must be an integer 1..5.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_name: str = Field(..., min_length=1, max_length=100, description="Reviewer name")
    rating: int = Field(..., ge=1, le=5, description="Star rating 1..5")
    text: Optional[str] = Field(None, description="Review body")
    images: list[str] = Field(default_factory=list, description="Image URLs")


class ReviewRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    listing_id: int
    user_name: str
    rating: int
    text: str
    images: list[str]
    created_at: Optional[datetime] = None
