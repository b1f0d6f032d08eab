"""Identity gateway.

Wraps an IdentityProvider, keeps the current identity and notifies
subscribers whenever it changes. Subscribers get the current value as soon
as they register.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Union

import structlog

from trackacademia.auth.provider import IdentityProvider
from trackacademia.db.gateway import DataAccessGateway
from trackacademia.errors import AuthError, PersistenceError
from trackacademia.models import Account, Identity

logger = structlog.get_logger(__name__)

IdentityListener = Callable[[Union[Identity, None]], Union[Awaitable[None], None]]
Unsubscribe = Callable[[], None]


class IdentityGateway:
    """Sign-up, sign-in, sign-out and identity-change subscriptions."""

    def __init__(self, provider: IdentityProvider, gateway: DataAccessGateway):
        self._provider = provider
        self._gateway = gateway
        self._current: Identity | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def current(self) -> Identity | None:
        """Currently signed-in identity, None when signed out."""
        return self._current

    @property
    def provider(self) -> IdentityProvider:
        return self._provider

    async def subscribe(self, listener: IdentityListener) -> Unsubscribe:
        """Register a listener and call it with the current identity.

        Args:
            listener: Called with an Identity or None; may be a coroutine function

        Returns:
            Handle that removes the listener; must be called on teardown
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        try:
            await self._call(listener, self._current)
        except Exception:
            unsubscribe()
            raise

        return unsubscribe

    @staticmethod
    async def _call(listener: IdentityListener, identity: Identity | None) -> None:
        result = listener(identity)
        if inspect.isawaitable(result):
            await result

    async def _set_current(self, identity: Identity | None) -> None:
        self._current = identity
        for listener in list(self._listeners):
            await self._call(listener, identity)

    async def sign_up(
        self, email: str, password: str, display_name: str | None = None
    ) -> Identity:
        """Create an identity, then provision its Account record.

        Provisioning is best-effort: if the store write fails the identity
        still exists and the failure is only logged.

        Raises:
            AuthError: Provider rejected the account (see subclasses)
        """
        try:
            identity = await self._provider.create_account(email, password, display_name)
        except AuthError as e:
            logger.info("auth.sign_up_failed", code=e.code)
            raise

        logger.info("auth.signed_up", uid=identity.uid)
        await self._provision_account(identity, display_name)
        await self._set_current(identity)
        return identity

    async def _provision_account(
        self, identity: Identity, display_name: str | None
    ) -> None:
        account = Account(email=identity.email, display_name=display_name or None)
        try:
            await self._gateway.create("accounts", account, record_id=identity.uid)
        except PersistenceError as e:
            # TODO: reconcile identities left without an Account record
            logger.warning(
                "auth.account_provisioning_failed",
                uid=identity.uid,
                error=str(e),
            )

    async def sign_in(self, email: str, password: str) -> Identity:
        """Verify credentials and make the identity current.

        Raises:
            AuthError: Provider rejected the credentials (see subclasses)
        """
        try:
            identity = await self._provider.sign_in(email, password)
        except AuthError as e:
            logger.info("auth.sign_in_failed", code=e.code)
            raise

        logger.info("auth.signed_in", uid=identity.uid)
        await self._set_current(identity)
        return identity

    async def sign_out(self) -> None:
        """Drop the current identity. A no-op when already signed out."""
        identity = self._current
        if identity is None:
            return
        await self._provider.sign_out(identity)
        logger.info("auth.signed_out", uid=identity.uid)
        await self._set_current(None)
