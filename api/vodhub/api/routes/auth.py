from fastapi import APIRouter, Depends, HTTPException, Response, status

from vodhub.api.deps import SESSION_COOKIE_NAME, is_admin
from vodhub.core.config import settings
from vodhub.core.security import create_session_token, verify_admin_password
from vodhub.schema.auth import AdminLogin, SessionStatus

router = APIRouter()


def set_session_cookie(response: Response, token: str) -> None:
    secure = settings.environment.lower() == "production"
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_expires_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=secure,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    secure = settings.environment.lower() == "production"
    response.delete_cookie(SESSION_COOKIE_NAME, path="/", httponly=True, samesite="lax", secure=secure)


@router.post("/login", response_model=SessionStatus)
async def login(payload: AdminLogin, response: Response) -> SessionStatus:
    if not verify_admin_password(payload.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")
    set_session_cookie(response, create_session_token())
    return SessionStatus(authenticated=True)


@router.post("/logout", response_model=SessionStatus)
async def logout(response: Response) -> SessionStatus:
    clear_session_cookie(response)
    return SessionStatus(authenticated=False)


@router.get("/session", response_model=SessionStatus)
async def session_status(authenticated: bool = Depends(is_admin)) -> SessionStatus:
    return SessionStatus(authenticated=authenticated)
