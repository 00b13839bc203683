from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from .review import ReviewDecision


class DeviceCreate(BaseModel):
    device_id: str = Field(..., min_length=1, max_length=128)
    device_model: Optional[str] = Field(None, max_length=100)


class DeviceReviewRequest(BaseModel):
    active_device_id: str
    decision: ReviewDecision


class DeviceResponse(BaseModel):
    id: str
    user_id: str
    device_id: str
    device_model: Optional[str] = None
    last_login: Optional[datetime] = None
    is_active: bool
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DeviceListResponse(BaseModel):
    records: List[DeviceResponse]
    total: int
