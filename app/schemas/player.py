from typing import Optional
from pydantic import BaseModel, Field

from app.models.player import Player


class PlayerCreate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)


class PlayerUpdate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)


class DuplicateCheckResponse(BaseModel):
    duplicate: Optional[Player] = None


class OwnerCreate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=100)
    age: int
