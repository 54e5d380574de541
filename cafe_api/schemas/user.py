from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime

class UserCreate(BaseModel):
    """Registration payload; required fields are checked by the service."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    contact: Optional[str] = None

class UserResponse(BaseModel):
    """Public profile fields (never the password hash)."""
    id: int
    name: str
    email: str
    profile_pic: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    contact: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CurrentUser(BaseModel):
    """Identity resolved from the bearer token"""
    id: int
    email: str
    name: str

class RegisterResponse(BaseModel):
    message: str
    user: UserResponse

class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserResponse

class ProfileResponse(BaseModel):
    profile: UserResponse

class ProfileUpdateResponse(BaseModel):
    message: str
    user: UserResponse

class ProfilePicResponse(BaseModel):
    message: str
    url: str
    user: UserResponse
