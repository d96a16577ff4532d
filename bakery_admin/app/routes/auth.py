from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...data.models import User
from ...schemas.io_models import AdminUser, LoginRequest, LoginResponse, MessageResponse
from ..auth import get_token, login_admin, require_admin
from ..session import SessionManager, get_session_manager

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Sign in an admin and hand back a session token (also set as a cookie)."""
    token, user = login_admin(db, sessions, request.email, request.password)
    response.set_cookie("session", token, max_age=sessions.ttl_seconds, httponly=True, samesite="lax")
    return LoginResponse(token=token, expires_in=sessions.ttl_seconds, user=AdminUser.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
def logout(
    response: Response,
    admin: User = Depends(require_admin),
    token: str = Depends(get_token),
    sessions: SessionManager = Depends(get_session_manager),
):
    sessions.delete_session(token)
    response.delete_cookie("session")
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=AdminUser)
async def me(admin: User = Depends(require_admin)):
    return admin
