"""Firebase Authentication over its REST API.

Endpoints (identitytoolkit v1):
- accounts:signUp             create an email/password account
- accounts:signInWithPassword verify credentials
- accounts:update             set the display name

Sign-out is local: the id token is simply dropped.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from trackacademia.auth.provider import IdentityProvider
from trackacademia.errors import (
    AccountAlreadyExists,
    AuthError,
    InvalidCredentials,
    NetworkError,
    WeakPassword,
)
from trackacademia.models import Identity

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://identitytoolkit.googleapis.com/v1"

# Firebase error code -> (exception type, user-facing message)
ERROR_MAP: dict[str, tuple[type[AuthError], str]] = {
    "EMAIL_EXISTS": (AccountAlreadyExists, "An account with this email already exists"),
    "WEAK_PASSWORD": (WeakPassword, "Password should be at least 6 characters"),
    "INVALID_LOGIN_CREDENTIALS": (InvalidCredentials, "Invalid email or password"),
    "EMAIL_NOT_FOUND": (InvalidCredentials, "Invalid email or password"),
    "INVALID_PASSWORD": (InvalidCredentials, "Invalid email or password"),
    "INVALID_EMAIL": (InvalidCredentials, "Invalid email address"),
    "USER_DISABLED": (InvalidCredentials, "This account has been disabled"),
    "TOO_MANY_ATTEMPTS_TRY_LATER": (AuthError, "Too many attempts, try again later"),
}


def map_firebase_error(message: str) -> AuthError:
    """Turn a Firebase error message into an AuthError.

    Messages look like "WEAK_PASSWORD : Password should be at least 6 characters".
    """
    code = message.split(":", 1)[0].strip() or "UNKNOWN"
    error_type, text = ERROR_MAP.get(code, (AuthError, f"Authentication failed ({code})"))
    return error_type(text, code=code)


class FirebaseIdentityProvider(IdentityProvider):
    """IdentityProvider backed by the Firebase Auth REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            api_key: Firebase web API key
            base_url: identitytoolkit base URL
            timeout: Request timeout in seconds
            client: Pre-built client (tests inject one with a MockTransport)
        """
        if not api_key:
            raise ValueError("Firebase API key is required")
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._client.post(
                f"/accounts:{endpoint}",
                params={"key": self._api_key},
                json=payload,
            )
        except httpx.TransportError as e:
            logger.warning("firebase.unreachable", endpoint=endpoint, error=str(e))
            raise NetworkError(
                "Could not reach the authentication service", code="NETWORK_ERROR"
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_error:
            message = (data.get("error") or {}).get("message", "")
            logger.info(
                "firebase.request_rejected",
                endpoint=endpoint,
                status=response.status_code,
                code=message.split(":", 1)[0].strip(),
            )
            raise map_firebase_error(message)

        return data

    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> Identity:
        data = await self._post(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        if display_name:
            await self._post(
                "update",
                {
                    "idToken": data["idToken"],
                    "displayName": display_name,
                    "returnSecureToken": False,
                },
            )
        return Identity(
            uid=data["localId"],
            email=data.get("email", email),
            display_name=display_name or None,
            id_token=data.get("idToken"),
        )

    async def sign_in(self, email: str, password: str) -> Identity:
        data = await self._post(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return Identity(
            uid=data["localId"],
            email=data.get("email", email),
            display_name=data.get("displayName") or None,
            id_token=data.get("idToken"),
        )

    async def sign_out(self, identity: Identity) -> None:
        logger.debug("firebase.signed_out", uid=identity.uid)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
