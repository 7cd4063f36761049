"""
Auth feature: API routes for registration, login, logout, and current user.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from rememberly.core.dependencies import get_access_token, get_registry, get_session
from rememberly.core.exceptions import OFFLINE_MESSAGE
from rememberly.core.session import AppSession, SessionRegistry
from rememberly.features.auth.schemas import (
    CredentialsRequest,
    LoginResponse,
    MessageResponse,
    UserResponse,
)

router = APIRouter()


def _auth_failure(message: str | None) -> HTTPException:
    code = (
        status.HTTP_503_SERVICE_UNAVAILABLE
        if message == OFFLINE_MESSAGE
        else status.HTTP_400_BAD_REQUEST
    )
    return HTTPException(status_code=code, detail=message or "Authentication failed")


def _login_response(session: AppSession) -> LoginResponse:
    return LoginResponse(
        access_token=session.access_token,
        user=UserResponse(id=session.user_id, email=session.email),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(data: CredentialsRequest, registry: SessionRegistry = Depends(get_registry)):
    """Register a new account; signs in right away unless email confirmation is required."""
    session, result = await registry.register(data.email, data.password)
    if result.error:
        raise _auth_failure(result.error)
    if session is None:
        return MessageResponse(message="Check your email to confirm your account")
    return _login_response(session)


@router.post("/login", response_model=LoginResponse)
async def login(data: CredentialsRequest, registry: SessionRegistry = Depends(get_registry)):
    """Sign in with email and password."""
    session, result = await registry.open(data.email, data.password)
    if session is None:
        raise _auth_failure(result.error)
    return _login_response(session)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_access_token),
    registry: SessionRegistry = Depends(get_registry),
):
    """Sign out and dispose the session caches."""
    await registry.close(token)
    return MessageResponse(message="Signed out")


@router.get("/me", response_model=UserResponse)
async def me(
    token: str = Depends(get_access_token),
    session: AppSession = Depends(get_session),
    registry: SessionRegistry = Depends(get_registry),
):
    """Current user, re-validated against Supabase auth."""
    user = await session.auth.get_current_user()
    if user is None:
        if session.auth.session_expired:
            registry.evict(token)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in")
    return UserResponse(id=str(user.id), email=getattr(user, "email", None))
