"""In-process identity provider for local development and tests."""

from __future__ import annotations

import hashlib
import hmac
import secrets
import uuid
from dataclasses import dataclass

import structlog

from trackacademia.auth.provider import (
    MIN_PASSWORD_LENGTH,
    IdentityProvider,
    validate_email,
)
from trackacademia.errors import AccountAlreadyExists, InvalidCredentials, WeakPassword
from trackacademia.models import Identity

logger = structlog.get_logger(__name__)


def _hash_password(password: str, salt: str) -> str:
    return hashlib.sha256(f"{salt}:{password}".encode("utf-8")).hexdigest()


@dataclass
class _StoredUser:
    uid: str
    email: str
    salt: str
    password_hash: str
    display_name: str | None = None


class MemoryIdentityProvider(IdentityProvider):
    """Keeps accounts in a dict keyed by lowercase email."""

    def __init__(self):
        self._users: dict[str, _StoredUser] = {}

    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> Identity:
        key = email.strip().lower()
        if not validate_email(key):
            raise InvalidCredentials("Invalid email address", code="INVALID_EMAIL")
        if key in self._users:
            raise AccountAlreadyExists(
                "An account with this email already exists", code="EMAIL_EXISTS"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPassword(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters",
                code="WEAK_PASSWORD",
            )

        salt = secrets.token_hex(8)
        user = _StoredUser(
            uid=uuid.uuid4().hex[:28],
            email=key,
            salt=salt,
            password_hash=_hash_password(password, salt),
            display_name=display_name or None,
        )
        self._users[key] = user
        logger.debug("memory_auth.account_created", uid=user.uid)
        return self._identity(user)

    async def sign_in(self, email: str, password: str) -> Identity:
        user = self._users.get(email.strip().lower())
        if user is None or not hmac.compare_digest(
            user.password_hash, _hash_password(password, user.salt)
        ):
            raise InvalidCredentials(
                "Invalid email or password", code="INVALID_LOGIN_CREDENTIALS"
            )
        return self._identity(user)

    async def sign_out(self, identity: Identity) -> None:
        logger.debug("memory_auth.signed_out", uid=identity.uid)

    @staticmethod
    def _identity(user: _StoredUser) -> Identity:
        return Identity(
            uid=user.uid,
            email=user.email,
            display_name=user.display_name,
            id_token=secrets.token_urlsafe(16),
        )
