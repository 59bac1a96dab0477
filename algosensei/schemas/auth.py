"""
Pydantic Schemas for Authentication endpoints
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request schema for user registration"""
    username: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="Password")


class RegisterResponse(BaseModel):
    message: str = "Registration successful"


class LoginRequest(BaseModel):
    """Request schema for credential-based login"""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="Password")


class UserResponse(BaseModel):
    """Public user profile (never includes the password hash)"""
    id: str
    username: str
    email: str
    name: str = ""
    bio: str = ""
    preferred_languages: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class SessionResponse(BaseModel):
    """Issued session credential"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class LogoutResponse(BaseModel):
    success: bool = True
