from typing import Annotated, Optional
import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.core.security import verify_access_token
from app.services.identity_service import (
    ADMIN_ROLE,
    IdentityProvider,
    IdentityUser,
    get_identity_provider,
)


logger = logging.getLogger(__name__)

# HTTP Bearer security scheme; missing credentials are answered with 401 below
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> IdentityUser:
    """
    Dependency to get the current authenticated user.
    Validates the JWT token and resolves its subject through the identity provider.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    user_id = verify_access_token(credentials.credentials)
    if user_id is None:
        logger.warning("Token verification failed - invalid or expired token")
        raise credentials_exception

    user = await provider.validate(user_id)
    if user is None:
        logger.warning(f"User {user_id} rejected by identity provider '{provider.name}'")
        raise credentials_exception

    if not user.is_active:
        logger.warning(f"User {user_id} is inactive")
        raise credentials_exception

    return user


def require_roles(*roles: str):
    """
    Dependency factory to require one of the given roles.

    Usage:
        @router.post("/", dependencies=[Depends(require_roles("ADMIN"))])
        async def create_salary_record():
            ...
    """
    async def role_dependency(
        user: Annotated[IdentityUser, Depends(get_current_user)],
    ):
        if user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied. Required role: {', '.join(roles)}"
            )
        return True

    return role_dependency


require_admin = require_roles(ADMIN_ROLE)


# Type aliases for cleaner endpoint signatures
CurrentUser = Annotated[IdentityUser, Depends(get_current_user)]
DB = Annotated[AsyncSession, Depends(get_db)]
