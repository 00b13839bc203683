from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    COLABORADOR = "colaborador"
    GESTOR = "gestor"
    ADMIN = "admin"

    @property
    def is_reviewer(self) -> bool:
        return self in (Role.GESTOR, Role.ADMIN)


class ProfileBase(BaseModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Role = Role.COLABORADOR
    avatar_url: Optional[str] = None


class ProfileCreate(BaseModel):
    id: Optional[str] = Field(None, max_length=36, description="Identity provider user id; generated when omitted")
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    role: Role = Role.COLABORADOR


class ProfileNameUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileRoleUpdate(BaseModel):
    role: Role


class ProfileResponse(ProfileBase):
    id: str
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
