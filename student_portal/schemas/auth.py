from pydantic import BaseModel, EmailStr
from typing import List


class Identity(BaseModel):
    """Authenticated caller, passed explicitly into the policy and controllers."""
    user_id: str
    role: str
    display_name: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    display_name: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str


class MeResponse(BaseModel):
    user_id: str
    email: str
    display_name: str
    role: str
    sections: List[str]


class UserResponse(BaseModel):
    id: str
    email: str
    display_name: str
    role: str

    class Config:
        from_attributes = True


class RoleUpdateRequest(BaseModel):
    role: str
