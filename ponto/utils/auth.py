"""
Session resolution: bearer JWT -> authenticated actor.

Tokens are issued by the external identity provider and signed with the shared
secret. The role is read from the `profiles` table and coerced into `Role`
here, once; everything downstream works with the enum.
"""

from dataclasses import dataclass
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ponto.config import settings
from ponto.database import get_db
from ponto.exceptions import Unauthorized, Forbidden
from ponto.models.profile import Profile
from ponto.schemas.profile import Role

# A missing header is reported as 401 by resolve_actor
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a request"""
    id: str
    role: Role

    @property
    def is_reviewer(self) -> bool:
        return self.role.is_reviewer


def verify_token(token: str) -> dict:
    """
    Verify and decode a JWT token.

    Raises:
        Unauthorized: If the token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise Unauthorized("Unauthorized: Invalid token")


def resolve_actor(token: Optional[str], db: Session) -> Actor:
    """
    Resolve a bearer token into an Actor.

    Args:
        token: Raw bearer token (without the "Bearer " prefix)
        db: Database session

    Returns:
        The authenticated actor

    Raises:
        Unauthorized: Missing/invalid token, unknown profile or unknown role
    """
    if not token:
        raise Unauthorized("Unauthorized: Missing Authorization header")

    payload = verify_token(token)
    profile_id = payload.get("sub")
    if not profile_id:
        raise Unauthorized("Unauthorized: Invalid token")

    profile = db.query(Profile).filter(Profile.id == str(profile_id)).first()
    if profile is None:
        raise Unauthorized("Unauthorized: Unknown user")

    try:
        role = Role(profile.role)
    except ValueError:
        raise Unauthorized(f"Unauthorized: Unknown role {profile.role!r}")

    return Actor(id=profile.id, role=role)


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> Actor:
    """FastAPI dependency resolving the caller from the Authorization header"""
    token = credentials.credentials if credentials else None
    return resolve_actor(token, db)


async def get_current_reviewer(
    actor: Actor = Depends(get_current_actor)
) -> Actor:
    """FastAPI dependency that only admits gestor/admin"""
    if not actor.is_reviewer:
        raise Forbidden("Forbidden: Only managers and admins can perform this action.")
    return actor
