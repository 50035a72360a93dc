from pydantic import BaseModel, EmailStr

from app.schemas.base import CamelModel
from app.schemas.user import User

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenPayload(BaseModel):
    sub: str | None = None
    role: str | None = None
    exp: int | None = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class LoginResponse(CamelModel):
    """Response for the login and register endpoints."""
    token: Token
    user: User
