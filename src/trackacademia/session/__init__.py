"""Session state and navigation gating."""

from trackacademia.session.controller import SessionController, SessionState, StateObserver
from trackacademia.session.guard import GuardDecision, GuardOutcome, evaluate_route

__all__ = [
    "GuardDecision",
    "GuardOutcome",
    "SessionController",
    "SessionState",
    "StateObserver",
    "evaluate_route",
]
