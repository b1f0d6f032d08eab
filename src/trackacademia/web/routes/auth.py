"""Sign-up, sign-in, sign-out and session endpoints.

These are never gated: they are where the guard sends signed-out users.
Sign-up and sign-in hand back the identity's token; gated endpoints
require it as a bearer token.
"""

from fastapi import APIRouter, Depends, Header, HTTPException, status

from trackacademia.bootstrap import Services
from trackacademia.session.controller import SessionState
from trackacademia.web.dependencies import get_services, token_matches
from trackacademia.web.schemas import (
    AuthResponse,
    IdentityResponse,
    ProfileResponse,
    SessionResponse,
    SignInRequest,
    SignUpRequest,
)

router = APIRouter(prefix="/api", tags=["auth"])


def session_response(state: SessionState) -> SessionResponse:
    """Serialize a session snapshot."""
    return SessionResponse(
        is_loading=state.is_loading,
        signed_in=state.is_signed_in,
        identity=(
            IdentityResponse.model_validate(state.identity) if state.identity else None
        ),
        profile=(
            ProfileResponse.model_validate(state.profile) if state.profile else None
        ),
    )


def auth_response(state: SessionState) -> AuthResponse:
    """Session snapshot plus the signed-in identity's token."""
    return AuthResponse(
        **session_response(state).model_dump(),
        id_token=state.identity.id_token if state.identity else None,
    )


@router.get("/session", response_model=SessionResponse)
async def get_session(services: Services = Depends(get_services)) -> SessionResponse:
    """Current identity and profile."""
    return session_response(services.session.state)


@router.post(
    "/auth/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def sign_up(
    request: SignUpRequest, services: Services = Depends(get_services)
) -> AuthResponse:
    """Create an account and sign in."""
    await services.session.sign_up(
        email=request.email.strip(),
        password=request.password,
        display_name=(request.display_name or "").strip() or None,
    )
    return auth_response(services.session.state)


@router.post("/auth/login", response_model=AuthResponse)
async def sign_in(
    request: SignInRequest, services: Services = Depends(get_services)
) -> AuthResponse:
    """Sign in with email and password."""
    await services.session.sign_in(request.email.strip(), request.password)
    return auth_response(services.session.state)


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    services: Services = Depends(get_services),
    authorization: str | None = Header(default=None),
) -> None:
    """Sign out the current user; requires their bearer token."""
    state = services.session.state
    if state.identity is not None and not token_matches(state, authorization):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "message": "Sign in to continue",
                "reason": "auth_required",
                "redirect": services.config.routes.sign_in,
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    await services.session.sign_out()
