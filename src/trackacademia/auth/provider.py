"""Authentication provider boundary (email + password only)."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod

from trackacademia.models import Identity

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Provider-side rule shared by Firebase and the memory backend
MIN_PASSWORD_LENGTH = 6


def validate_email(email: str) -> bool:
    """Check email format."""
    return bool(EMAIL_PATTERN.match(email))


class IdentityProvider(ABC):
    """Abstract base class for identity providers.

    Implementations raise AuthError subclasses with human-readable messages.
    """

    @abstractmethod
    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> Identity:
        """Create an identity and return it signed in."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Identity:
        """Verify credentials and return the identity."""

    @abstractmethod
    async def sign_out(self, identity: Identity) -> None:
        """Forget the identity's session."""

    async def close(self) -> None:
        """Release provider resources."""
