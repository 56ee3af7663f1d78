"""Registration, login and session endpoints."""

from fastapi import APIRouter, Depends, Request

from befit.api.dependencies import get_container, require_session
from befit.api.schemas import LoginRequest, RegisterRequest, SessionResponse
from befit.domain.accounts import Session

router = APIRouter(prefix="/api", tags=["accounts"])


@router.post("/register")
async def register(payload: RegisterRequest, request: Request) -> SessionResponse:
    """Create an account and return a session token."""
    container = get_container(request)
    session = container.account_service.register(
        payload.name, payload.email, payload.password
    )
    return SessionResponse(
        token=session.token,
        email=session.email,
        expires_at=session.expires_at,
        name=payload.name.strip(),
    )


@router.post("/login")
async def login(payload: LoginRequest, request: Request) -> SessionResponse:
    """Verify credentials and return a session token."""
    container = get_container(request)
    session = container.account_service.login(payload.email, payload.password)
    return SessionResponse(
        token=session.token,
        email=session.email,
        expires_at=session.expires_at,
        name=container.account_service.display_name(session),
    )


@router.get("/me")
async def me(
    request: Request, session: Session = Depends(require_session)
) -> dict[str, str]:
    """Return the signed-in account."""
    container = get_container(request)
    return {
        "email": session.email,
        "name": container.account_service.display_name(session),
    }
