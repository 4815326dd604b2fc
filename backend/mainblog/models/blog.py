"""
Main Blog Backend — Blog SQLAlchemy Model
===========================================

What:  ORM model representing the `blogs` table.
Who:   Used by BlogService for every blog operation and by Alembic.

Column notes:
    - id: UUID assigned in Python at creation, used to address update/delete
    - author: free text. There is deliberately no foreign key to
      users.username; any string is accepted and never checked.
    - image: URL path of the uploaded file ("/uploads/<name>") or NULL
    - created_at: UTC, set once at insert and never updated
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mainblog.database import Base


class Blog(Base):
    """
    A blog post.

    Lifecycle:
        create → (update)* → (delete). No versioning, no soft delete.

    Query Patterns:
        - List by author: WHERE author = :username (exact, case-sensitive)
        - Search by title: WHERE title ~* :pattern (regex, case-insensitive)
        - Update/delete: WHERE id = :uuid (primary key)
    """

    __tablename__ = "blogs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Required Fields ───────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Username of the writer; not validated against users",
    )
    category: Mapped[str] = mapped_column(String(255), nullable=False)

    # ── Optional Fields ───────────────────────────────────────────────────
    external_link: Mapped[Optional[str]] = mapped_column(
        "external_link",
        Text,
        nullable=True,
        default=None,
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
        default=None,
        comment="URL path of the uploaded image, e.g. /uploads/1718000000000-ab12cd34.png",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Blog(id={self.id}, title='{self.title}', author='{self.author}')>"
