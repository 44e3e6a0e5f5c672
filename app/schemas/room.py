from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class RoomBase(BaseModel):
    room_number: str = Field(min_length=1)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    maintenance_notes: Optional[str] = None

class RoomCreate(RoomBase):
    category: str = "Standard"
    status: str = "Available"

class RoomResponse(RoomBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category_name: str
    status_name: str
