"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from typing import List, Optional


class UserLogin(BaseModel):
    """
    Schema for user login.
    
    Used by POST /auth/login endpoint.
    """
    email: EmailStr = Field(..., description="Account email")
    password: str = Field(..., min_length=1, description="Password")


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.
    
    Returned by a successful login.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user_id: int = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    roles: List[str] = Field(default_factory=list, description="Assigned roles")
    active_role: str = Field(..., description="Role the session acts under")


class ProfileResponse(BaseModel):
    first_name: str
    middle_name: Optional[str] = None
    surname_1: str
    surname_2: Optional[str] = None
    id_number: str
    phone: str
    address: str
    avatar_url: Optional[str] = None
    
    class Config:
        from_attributes = True


class UserResponse(BaseModel):
    """
    Schema for user information response.
    
    Used by GET /auth/me endpoint.
    """
    id: int
    email: str
    is_active: bool
    created_at: datetime
    profile: Optional[ProfileResponse] = None
    roles: List[str]
    active_role: str
