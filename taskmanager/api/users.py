# User API routes for registration, login and profile

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db import get_app_db
from taskmanager.dependencies import (
    get_current_user,
    get_token_service,
    get_user_service,
)
from taskmanager.models import User
from taskmanager.schemas import MessageResponse, Token, UserInfo, UserLogin, UserRegister
from taskmanager.services.token_service import TokenService
from taskmanager.services.user_service import UserService
from taskmanager.utils.logger import setup_logger

logger = setup_logger("api.users")

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED
)
async def register_user(
    user_data: UserRegister,
    db: AsyncSession = Depends(get_app_db),
    user_service: UserService = Depends(get_user_service),
):
    """Register a new user with username, email and password."""
    if await user_service.exists(user_data.username, user_data.email, db=db):
        logger.warning(f"Registration rejected: '{user_data.username}' or email taken")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username or Email already exists.",
        )

    result = await user_service.create_user(
        user_data.username, user_data.email, user_data.password, db=db
    )
    if not result.succeeded:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=result.error
        )

    return MessageResponse(message="User registered successfully.")


@router.post("/login", response_model=Token)
async def login_user(
    user_data: UserLogin,
    db: AsyncSession = Depends(get_app_db),
    user_service: UserService = Depends(get_user_service),
    token_service: TokenService = Depends(get_token_service),
):
    """Authenticate by username or email and return a bearer token."""
    user = await user_service.authenticate(
        user_data.username, user_data.password, db=db
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return Token(access_token=token_service.issue(user), token_type="bearer")


@router.get("/me", response_model=UserInfo)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """Retrieve current authenticated user's profile information."""
    return UserInfo.model_validate(current_user)
