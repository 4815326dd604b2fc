"""
Main Blog Backend — User SQLAlchemy Model
===========================================

What:  ORM model representing the `users` table.
Who:   Used by AuthService for registration and login.

Lifecycle:
    Created only by registration; never updated or deleted by any route.
    The password column holds a bcrypt hash, never the plaintext.
"""

import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from mainblog.database import Base


class User(Base):
    """A registered account."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Credentials ───────────────────────────────────────────────────────
    # unique=True: the store rejects a duplicate even when two registrations
    # race past the existence check in AuthService.register
    username: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login name, unique across all users",
    )

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Salted bcrypt hash of the password",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
