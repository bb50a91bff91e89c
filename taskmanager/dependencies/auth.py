"""
Authentication dependencies for FastAPI route protection.
"""


from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from taskmanager.db import get_app_db
from taskmanager.dependencies.services import get_token_service, get_user_service
from taskmanager.models import User
from taskmanager.services.token_service import TokenService
from taskmanager.services.user_service import UserService

# HTTP Bearer token extraction; missing header is answered with 401 below
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_app_db),
    token_service: TokenService = Depends(get_token_service),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Signature and expiry are checked here; everything downstream receives an
    already resolved user.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = token_service.resolve_user_id(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Could not validate credentials")

    user = await user_service.get_user(user_id, db=db)
    if user is None:
        raise _unauthorized("User not found")

    return user
