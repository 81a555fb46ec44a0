from pydantic import BaseModel, Field
from typing import Optional

from medstore.schemas.base import CamelModel


class LoginRequest(BaseModel):
    # admin accounts are not required to use deliverable addresses
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class AdminPrincipal(CamelModel):
    id: int
    email: str
    role: str = "admin"
    name: Optional[str] = None


class LoginResponse(CamelModel):
    success: bool = True
    admin: AdminPrincipal
