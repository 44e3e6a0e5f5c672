from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Optional


class BookingBase(BaseModel):
    room_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int = Field(1, ge=1)
    special_requests: Optional[str] = None


class BookingCreate(BookingBase):
    pass


class BookingUpdate(BaseModel):
    room_id: Optional[int] = None
    check_in_date: Optional[date] = None
    check_out_date: Optional[date] = None
    number_of_guests: Optional[int] = Field(None, ge=1)
    special_requests: Optional[str] = None
    notes: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    status_id: int
    notes: Optional[str] = None


class PaymentConfirmation(BaseModel):
    session_id: str = Field(min_length=1)


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    room_id: int
    status_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    total_amount: Decimal
    status_name: str
    user_name: str
    user_email: str
    room_number: str
    room_price: Decimal
    room_category: Optional[str] = None
    booking_date: datetime
    created_at: datetime
    updated_at: datetime


class BookingCheckoutResponse(BookingResponse):
    session_id: str
