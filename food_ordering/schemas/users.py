from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterPayload(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    full_name: Optional[str] = None
    phone: Optional[str] = None


class LoginPayload(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    user_type: str
    discount_type: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserOut


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=30)
    discount_type: Optional[str] = Field(default=None, max_length=30)


class DiscountInfoOut(BaseModel):
    discount_type: Optional[str] = None
    discount_photo: Optional[str] = None
