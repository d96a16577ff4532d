"""Admin sign-in and the `require_admin` route dependency."""
from typing import Optional

from fastapi import Cookie, Depends, Header
from sqlalchemy.orm import Session

from ..data.database import get_db
from ..data.models import User, UserRole
from ..utils.logger import get_logger
from ..utils.security import mask_pii, verify_password
from .exceptions import AuthenticationError, AuthorizationError
from .session import SessionManager, get_session_manager

logger = get_logger()


def login_admin(db: Session, sessions: SessionManager, email: str, password: str):
    """Check credentials and role; return (token, user)."""
    user = db.query(User).filter(User.email == (email or "").strip().lower()).first()
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Login failed for %s", mask_pii(email or ""))
        raise AuthenticationError("Invalid credentials")
    if user.role != UserRole.admin:
        logger.warning("Non-admin login attempt by user %s", user.id)
        raise AuthorizationError("Unauthorized access")

    token = sessions.create_session(user.id, user.email)
    logger.info("Admin %s signed in", user.id)
    return token, user


def _token_from(authorization: Optional[str], session_cookie: Optional[str]) -> Optional[str]:
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    return session_cookie or None


def get_token(
    authorization: Optional[str] = Header(default=None),
    session: Optional[str] = Cookie(default=None),
) -> Optional[str]:
    return _token_from(authorization, session)


def require_admin(
    token: Optional[str] = Depends(get_token),
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
) -> User:
    if not token:
        raise AuthenticationError("Not signed in")
    session_data = sessions.get_session(token)
    if not session_data:
        raise AuthenticationError("Session expired")

    user = db.get(User, session_data["user_id"])
    if user is None:
        sessions.delete_session(token)
        raise AuthenticationError("Account no longer exists")
    if user.role != UserRole.admin:
        # role revoked after sign-in
        sessions.delete_session(token)
        raise AuthorizationError("Unauthorized access")
    return user
