"""
Main Blog Backend — Auth Route Handlers
=========================================

What:  POST /register and POST /login.
How:   JSON body parsed into Credentials, delegated to AuthService.
Who:   Called by the frontend's sign-up and sign-in forms.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mainblog.database import get_db_session
from mainblog.schemas.common import ErrorResponse, MessageResponse
from mainblog.schemas.user import Credentials, LoginResponse
from mainblog.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.post(
    "/register",
    response_model=MessageResponse,
    responses={
        400: {"description": "Username already exists", "model": ErrorResponse},
        500: {"description": "Registration failed", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    credentials: Credentials,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await auth_service.register(
        db=db,
        username=credentials.username,
        password=credentials.password,
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid username or password", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Check credentials and echo the username",
    description=(
        "Verifies the password against the stored bcrypt hash. No token or "
        "session is issued; the response only carries the username."
    ),
)
async def login(
    credentials: Credentials,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await auth_service.login(
        db=db,
        username=credentials.username,
        password=credentials.password,
    )
