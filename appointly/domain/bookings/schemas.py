"""Booking domain schemas - Pydantic models for validation"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_slot_time


class BookingCreate(BaseModel):
    """Schema for booking a service slot"""

    serviceId: str
    staffId: str
    clientId: str
    date: dt.date
    time: dt.time

    @field_validator("serviceId", "staffId", "clientId")
    @classmethod
    def validate_ids(cls, v):
        if not v or not v.strip():
            raise ValueError("Identifier is required")
        return v.strip()

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        return validate_slot_time(v)


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: str
    serviceId: str
    serviceName: Optional[str] = None
    staffId: Optional[str] = None
    staffName: Optional[str] = None
    clientId: str
    clientName: Optional[str] = None
    date: dt.date
    time: dt.time
    status: str
    price: Optional[Decimal] = None
    duration: Optional[int] = None
    createdAt: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
