from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class UserCreate(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None
    password: str = Field(min_length=6)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    role: str
    created_at: datetime

    @field_validator("role", mode="before")
    @classmethod
    def flatten_role(cls, value):
        return value if isinstance(value, str) else value.name


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
