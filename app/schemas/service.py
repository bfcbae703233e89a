"""Pydantic schemas for the service catalogue."""

from uuid import UUID
from pydantic import BaseModel, Field


class ServiceCreate(BaseModel):
    name: str
    description: str = ""
    price: int = Field(ge=0)
    duration: int = Field(gt=0)  # minutes
    category: str = ""
    is_active: bool = True


class ServiceOut(BaseModel):
    id: UUID
    name: str
    description: str
    price: int
    duration: int
    category: str
    is_active: bool

    class Config:
        from_attributes = True
