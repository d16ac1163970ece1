from datetime import datetime

from pydantic import Field, field_validator

from .base import CamelModel

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class TagBase(CamelModel):
    """Base tag schema with common fields."""
    name: str
    color: str = Field(pattern=HEX_COLOR_PATTERN)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Tag name is required")
        return value


class TagCreate(TagBase):
    """Schema for creating new tags."""
    pass


class TagUpdate(TagBase):
    """Schema for replacing a tag's name and color."""
    pass


class Tag(TagBase):
    """Complete tag schema with all fields."""
    id: str
    created_at: datetime
    updated_at: datetime


class SuccessResponse(CamelModel):
    success: bool = True
