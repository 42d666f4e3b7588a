from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Optional

class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    tags: list[str] = []

class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    tags: Optional[list[str]] = None

class ProductOut(BaseModel):
    id: str
    name: str
    description: Optional[str]
    image_url: Optional[str]
    tags: list[str] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def _missing_tags_as_empty(cls, v):
        return v or []
