"""FastAPI dependencies: shared services and route gating."""

from __future__ import annotations

import hmac
from datetime import date
from typing import Callable

import structlog
from fastapi import Depends, Header, HTTPException, Request, status

from trackacademia.bootstrap import Services
from trackacademia.session.controller import SessionState
from trackacademia.session.guard import evaluate_route

logger = structlog.get_logger(__name__)

_MESSAGES = {
    "session_loading": "Session is loading",
    "auth_required": "Sign in to continue",
    "profile_incomplete": "Complete your degree setup to continue",
}


def bearer_token(authorization: str | None) -> str | None:
    """Token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def token_matches(state: SessionState, authorization: str | None) -> bool:
    """Whether the header carries the signed-in identity's token."""
    token = bearer_token(authorization)
    expected = state.identity.id_token if state.identity else None
    if token is None or not expected:
        return False
    return hmac.compare_digest(token.encode(), expected.encode())


def get_services(request: Request) -> Services:
    """Services built at startup (see web.api lifespan)."""
    return request.app.state.services


def get_session_state(services: Services = Depends(get_services)) -> SessionState:
    return services.session.state


def get_today(today: date | None = None) -> date:
    """Calendar day supplied by the client, else the server's local day."""
    return today or date.today()


def require_view(requires_profile_completion: bool = False) -> Callable[..., SessionState]:
    """Build a dependency that admits the request or answers with the redirect.

    Loading -> 503, sign-in redirect -> 401, profile-setup redirect -> 403.
    The response detail carries the redirect target. A request must present
    the signed-in identity's token as ``Authorization: Bearer <id_token>``;
    any other caller gets the sign-in redirect.
    """

    def dependency(
        services: Services = Depends(get_services),
        authorization: str | None = Header(default=None),
    ) -> SessionState:
        state = services.session.state
        decision = evaluate_route(
            state,
            requires_profile_completion=requires_profile_completion,
            routes=services.config.routes,
        )

        if decision.outcome != "loading" and state.identity is not None:
            if not token_matches(state, authorization):
                logger.warning("api.token_rejected", present=authorization is not None)
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail={
                        "message": _MESSAGES["auth_required"],
                        "reason": "auth_required",
                        "redirect": services.config.routes.sign_in,
                    },
                    headers={"WWW-Authenticate": "Bearer"},
                )

        if decision.outcome == "loading":
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={"message": _MESSAGES[decision.reason], "reason": decision.reason},
                headers={"Retry-After": "1"},
            )

        if decision.outcome == "redirect":
            status_code = (
                status.HTTP_401_UNAUTHORIZED
                if decision.reason == "auth_required"
                else status.HTTP_403_FORBIDDEN
            )
            raise HTTPException(
                status_code=status_code,
                detail={
                    "message": _MESSAGES[decision.reason],
                    "reason": decision.reason,
                    "redirect": decision.target,
                },
            )

        return state

    return dependency
