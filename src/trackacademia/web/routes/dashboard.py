"""Dashboard endpoint."""

from datetime import date

from fastapi import APIRouter, Depends

from trackacademia.bootstrap import Services
from trackacademia.core.dashboard import build_dashboard
from trackacademia.session.controller import SessionState
from trackacademia.web.dependencies import get_services, get_today, require_view
from trackacademia.web.schemas import DashboardResponse

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    state: SessionState = Depends(require_view(requires_profile_completion=True)),
    services: Services = Depends(get_services),
    today: date = Depends(get_today),
) -> DashboardResponse:
    """Degree, book count and lectures logged in the last seven days."""
    summary = await build_dashboard(services.gateway, state.identity, state.profile, today)
    return DashboardResponse.model_validate(summary)
