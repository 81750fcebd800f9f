from typing import Optional

from pydantic import BaseModel, EmailStr


class UserCreate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    role: Optional[str] = None


class UserSignin(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class TokenRefresh(BaseModel):
    token: Optional[str] = None


class SigninResponse(BaseModel):
    id: int
    username: str
    exp: int
    token: str


class TokenResponse(BaseModel):
    token: str


class UserResponse(BaseModel):
    id: int
    username: str
    email: str
    role: str

    class Config:
        from_attributes = True
