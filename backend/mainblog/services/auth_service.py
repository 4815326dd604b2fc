"""
Main Blog Backend — Auth Service
==================================

What:  Registration and login against the `users` table.
How:   bcrypt for one-way salted hashing; hashing and verification run in the
       thread pool because bcrypt is deliberately CPU-heavy.
Who:   Called by the /register and /login route handlers.

There is no session or token layer. A successful login only echoes the
username back; the client is trusted to remember it.
"""

import logging
from typing import Optional

import bcrypt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from mainblog.config import settings
from mainblog.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    MainBlogError,
)
from mainblog.models.user import User
from mainblog.schemas.common import MessageResponse
from mainblog.schemas.user import LoginResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Password Hashing
# ══════════════════════════════════════════════════════════════════════════

# bcrypt only reads the first 72 bytes; bcrypt>=5 raises instead of truncating
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Return a salted bcrypt hash of `password` as text."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Check `password` against a hash produced by hash_password."""
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a password bcrypt refuses to process
        return False


class AuthService:
    """
    Business logic for user accounts.

    Responsibilities:
        - register(): existence check + insert
        - login(): lookup + hash comparison
    """

    async def register(self, db: AsyncSession, username: str, password: str) -> MessageResponse:
        """
        Create a new user.

        The existence check and the insert are not locked together. If another
        request registers the same name in between, the unique index rejects
        the flush and the caller gets the generic 500 message.

        Raises:
            ConflictError: username already exists (→ 400)
            DatabaseError: anything else, including the unique-index race (→ 500)
        """
        try:
            result = await db.execute(select(User).where(User.username == username))
            if result.scalar_one_or_none() is not None:
                raise ConflictError(
                    message="Username already exists",
                    context={"username": username},
                )

            hashed = await run_in_threadpool(hash_password, password)
            db.add(User(username=username, password=hashed))
            await db.flush()
            logger.info("Registered user %s", username)
            return MessageResponse(message="Registration successful")

        except MainBlogError:
            raise
        except Exception as e:
            logger.error("Registration failed for %s: %s", username, str(e), exc_info=True)
            raise DatabaseError(
                message="Registration failed",
                context={"error_type": type(e).__name__},
            )

    async def login(self, db: AsyncSession, username: str, password: str) -> LoginResponse:
        """
        Verify credentials.

        Raises:
            AuthenticationError: unknown username or wrong password, same message (→ 400)
            DatabaseError: lookup failed (→ 500)
        """
        try:
            result = await db.execute(select(User).where(User.username == username))
            user = result.scalar_one_or_none()
            if user is None:
                raise AuthenticationError(context={"reason": "unknown_user"})

            if not await run_in_threadpool(verify_password, password, user.password):
                raise AuthenticationError(context={"reason": "wrong_password"})

            logger.info("User %s logged in", user.username)
            return LoginResponse(message="Login successful", username=user.username)

        except MainBlogError:
            raise
        except Exception as e:
            logger.error("Login failed for %s: %s", username, str(e), exc_info=True)
            raise DatabaseError(
                message="Error logging in, please try again",
                context={"error_type": type(e).__name__},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
