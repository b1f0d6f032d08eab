"""Route guard: decide whether a view may render for the current session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from trackacademia.config.app_config import RouteConfig
from trackacademia.session.controller import SessionState

GuardOutcome = Literal["loading", "redirect", "admit"]


@dataclass(frozen=True)
class GuardDecision:
    """Result contract for route gating."""

    outcome: GuardOutcome
    reason: str
    target: str | None = None

    @property
    def admitted(self) -> bool:
        return self.outcome == "admit"


def evaluate_route(
    state: SessionState,
    requires_profile_completion: bool = False,
    routes: RouteConfig | None = None,
) -> GuardDecision:
    """Gate a view on identity and profile completeness.

    A profile that failed to load (None) does not block the view: only a
    loaded profile without a degree triggers the profile-setup redirect.

    Args:
        state: Current session snapshot
        requires_profile_completion: View needs a declared degree
        routes: Redirect targets (default: RouteConfig())

    Returns:
        GuardDecision with outcome loading, redirect (with target) or admit
    """
    routes = routes or RouteConfig()

    if state.is_loading:
        return GuardDecision(outcome="loading", reason="session_loading")

    if state.identity is None:
        return GuardDecision(
            outcome="redirect", reason="auth_required", target=routes.sign_in
        )

    if (
        requires_profile_completion
        and state.profile is not None
        and not state.profile.has_degree
    ):
        return GuardDecision(
            outcome="redirect",
            reason="profile_incomplete",
            target=routes.profile_setup,
        )

    return GuardDecision(outcome="admit", reason="authenticated")
