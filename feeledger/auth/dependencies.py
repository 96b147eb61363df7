from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feeledger.auth.schemas import CurrentUser
from feeledger.auth.security import decode_access_token
from feeledger.core.models import Profile
from feeledger.db.session import get_db


# Tokens are issued by the external auth service; this URL is only advertised in the OpenAPI schema.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


async def resolve_user_from_token(db: AsyncSession, token: str) -> Optional[CurrentUser]:
    """Decode the token and load the requester's profile. None when either step fails."""
    payload = decode_access_token(token)
    if not payload:
        return None

    user_id_str = payload.get("user_id") or payload.get("sub")
    if not user_id_str:
        return None
    try:
        user_id = UUID(str(user_id_str))
    except ValueError:
        return None

    result = await db.execute(select(Profile).where(Profile.user_id == user_id))
    profile = result.scalar_one_or_none()
    if not profile:
        return None

    return CurrentUser(id=profile.user_id, role=profile.role, email=profile.email)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Resolve the authenticated user from the access token."""
    current_user = await resolve_user_from_token(db, token)
    if current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user
