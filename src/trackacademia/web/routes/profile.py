"""Profile endpoints (degree setup).

Gated on sign-in only: this is where incomplete profiles are sent.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from trackacademia.bootstrap import Services
from trackacademia.session.controller import SessionState
from trackacademia.web.dependencies import get_services, require_view
from trackacademia.web.schemas import ProfileResponse, ProfileUpdate

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
async def get_profile(state: SessionState = Depends(require_view())) -> ProfileResponse:
    """Profile of the signed-in user."""
    if state.profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return ProfileResponse.model_validate(state.profile)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdate,
    state: SessionState = Depends(require_view()),
    services: Services = Depends(get_services),
) -> ProfileResponse:
    """Update degree and/or display name; returns the re-read profile."""
    profile = await services.session.update_profile(
        **request.model_dump(exclude_unset=True)
    )
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return ProfileResponse.model_validate(profile)
