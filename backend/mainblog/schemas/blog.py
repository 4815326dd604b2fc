"""
Main Blog Backend — Blog Request/Response Schemas
===================================================

What:  Pydantic models defining the blog API contract.
How:   Field names are snake_case in Python; the JSON keys keep the shape the
       frontend already consumes (`_id`, `externalLink`, `createdAt`) through
       field aliases. FastAPI serializes response models by alias.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Input: multipart form fields shared by create and update
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class BlogForm:
    """
    Text fields of a create/update multipart request.

    Values arrive exactly as sent (missing fields are empty strings); the
    presence check lives in BlogService so that it produces the API's 400
    message instead of FastAPI's 422.
    """
    title: str = ""
    content: str = ""
    author: str = ""
    category: str = ""
    external_link: Optional[str] = None

    REQUIRED_FIELDS = ("title", "content", "author", "category")

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or empty."""
        return [name for name in self.REQUIRED_FIELDS if not getattr(self, name)]


@dataclass
class ImageUpload:
    """An uploaded file already read into memory by the route handler."""
    filename: str
    content: bytes


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BlogResponse(BaseModel):
    """Full representation of a stored blog post."""
    id: uuid.UUID = Field(alias="_id", description="Blog identifier")
    title: str
    content: str
    author: str
    category: str
    external_link: Optional[str] = Field(default=None, alias="externalLink")
    image: Optional[str] = Field(default=None, description="URL path of the uploaded image")
    created_at: datetime = Field(alias="createdAt")

    # populate_by_name: ORM rows are read by attribute name, JSON is written
    # and re-read by alias
    model_config = {"from_attributes": True, "populate_by_name": True}

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Timestamps are stored in UTC; SQLite hands them back without tzinfo."""
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class BlogEnvelope(BaseModel):
    """Returned by create and update: a message plus the stored blog."""
    message: str
    blog: BlogResponse


class BlogListResponse(BaseModel):
    """Returned by listing and search. No pagination: every match is included."""
    blogs: List[BlogResponse] = Field(default_factory=list)
