"""User request/response schemas."""
from datetime import datetime
from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional
from coachdesk.core.constants import UserRole


class UserRead(BaseModel):
    id: str
    email: EmailStr
    name: str
    role: UserRole
    active: bool
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ClientCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=2, max_length=200)
    password: str = Field(..., min_length=8)


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
    active: Optional[bool] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=200)
