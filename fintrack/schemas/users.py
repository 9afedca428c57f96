"""User, authentication and user-settings schemas"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)
    first_name: Optional[str] = Field(default=None, max_length=255)
    last_name: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: Optional[datetime] = None


class TokenResponse(BaseModel):
    user: UserRead
    token: str
    token_type: str = "bearer"


class UserSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    financial_year_start: str  # MM-DD
    financial_year_end: str  # MM-DD
    currency: str
    updated_at: Optional[datetime] = None


class UserSettingsUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value"""
    financial_year_start: Optional[str] = None
    financial_year_end: Optional[str] = None
    currency: Optional[str] = None
