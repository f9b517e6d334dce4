from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, constr


class RegisterIn(BaseModel):
    email: EmailStr
    password: constr(min_length=6, max_length=128)
    name: Optional[str] = None


class LoginIn(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[EmailStr] = None
    password: str


class RefreshIn(BaseModel):
    refresh_token: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: EmailStr
    name: Optional[str] = None


class Token(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
