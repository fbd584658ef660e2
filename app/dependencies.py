from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import get_db, get_session_factory
from app.models.user import User
from app.services.auth_service import TokenClaims, decode_access_token, get_user_by_id
from app.services.record_store import ANONYMOUS, Actor, RecordStore

bearer_scheme = HTTPBearer(auto_error=False)


async def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims | None:
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


async def get_current_user(
    claims: TokenClaims | None = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if claims is None:
        raise credentials_exception
    user = await get_user_by_id(db, claims.user_id)
    if user is None:
        raise credentials_exception
    return user


async def get_optional_user(
    claims: TokenClaims | None = Depends(get_token_claims),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    if claims is None:
        return None
    return await get_user_by_id(db, claims.user_id)


async def require_admin(
    claims: TokenClaims | None = Depends(get_token_claims),
    current_user: User = Depends(get_current_user),
) -> User:
    # The admin check reads the token claim, not the users row
    if claims is None or not claims.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


async def get_store(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    claims: TokenClaims | None = Depends(get_token_claims),
) -> RecordStore:
    """Record store acting as the caller; anonymous when no valid token was sent."""
    actor = Actor(user_id=claims.user_id, is_admin=claims.is_admin) if claims else ANONYMOUS
    return RecordStore(session_factory, actor)
