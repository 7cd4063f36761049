"""
FastAPI dependency injection functions.
"""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from rememberly.core.exceptions import NotAuthenticatedError
from rememberly.core.session import AppSession, SessionRegistry
from rememberly.features.summarizer.service import Summarizer, get_summarizer

# Bearer token scheme for Swagger UI
bearer_scheme = HTTPBearer()


def get_registry(request: Request) -> SessionRegistry:
    """Dependency: the session registry created in the app lifespan."""
    return request.app.state.sessions


def get_access_token(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> str:
    return credentials.credentials


def get_session(
    token: str = Depends(get_access_token),
    registry: SessionRegistry = Depends(get_registry),
) -> AppSession:
    """Dependency: the caller's application session.

    Raises:
        HTTPException 401: If the token has no open session.
    """
    try:
        return registry.get(token)
    except NotAuthenticatedError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session not found or expired, please sign in again",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_summarizer_dep() -> Summarizer:
    """Dependency: summarizer (overridable in tests)."""
    return get_summarizer()
