from datetime import datetime
from pydantic import BaseModel

class User(BaseModel):
    id: str
    email: str
    name: str = ""
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login_at: datetime | None = None

class LoginIn(BaseModel):
    email: str
    password: str

class RegisterIn(BaseModel):
    email: str
    name: str
    password: str
    super_key: str

class AuthResult(BaseModel):
    success: bool
    error: str | None = None
    user: User | None = None
