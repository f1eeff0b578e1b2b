import logging

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .errors import NotFound, Unauthorized
from .models import Role, Technician, User
from .security_utils import verify_jwt_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the caller from a Bearer JWT"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    token = credentials.credentials
    if len(token.split(".")) != 3:
        logger.warning(f"⚠️ Malformed token received, token length: {len(token)}")
        raise HTTPException(
            status_code=401, detail="Invalid token format. Expected a valid JWT token."
        )

    payload = verify_jwt_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=401, detail="Invalid token claims") from e

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Token subject {user_id} no longer exists")
        raise HTTPException(status_code=401, detail="User not found")

    logger.debug(f"✅ User authenticated: {user.email} ({user.role.value})")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.ADMIN:
        logger.warning(f"⚠️ User {user.id} attempted an admin-only action")
        raise Unauthorized("Access denied")
    return user


async def require_technician(user: User = Depends(get_current_user)) -> User:
    if user.role != Role.TECHNICIAN:
        raise Unauthorized("Only technicians allowed")
    return user


async def get_current_technician(
    user: User = Depends(require_technician),
    db: Session = Depends(get_db),
) -> Technician:
    """Technician profile linked to the calling TECHNICIAN user"""
    technician = db.query(Technician).filter(Technician.user_id == user.id).first()
    if not technician:
        raise NotFound("No technician profile is linked to this account")
    return technician
