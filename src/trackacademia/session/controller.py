"""Session controller.

Composes the identity gateway and the data-access gateway into one view of
"current user + current profile". The controller is the only writer of
SessionState; everyone else reads ``controller.state`` or observes changes.

Lifecycle:
    controller = SessionController(identity_gateway, data_gateway)
    await controller.start()   # subscribes; first event resolves loading
    ...
    await controller.stop()    # releases the identity subscription
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable

import structlog

from trackacademia.auth.identity import IdentityGateway, Unsubscribe
from trackacademia.db.gateway import DataAccessGateway
from trackacademia.errors import PersistenceError, Unauthorized
from trackacademia.models import Account, Identity

logger = structlog.get_logger(__name__)

StateObserver = Callable[["SessionState"], None]


@dataclass(frozen=True)
class SessionState:
    """Snapshot of the session. Replaced wholesale on every change."""

    identity: Identity | None = None
    profile: Account | None = None
    is_loading: bool = True

    @property
    def is_signed_in(self) -> bool:
        return self.identity is not None


class SessionController:
    """Process-wide session state driven by identity events."""

    def __init__(self, identity: IdentityGateway, gateway: DataAccessGateway):
        self._identity = identity
        self._gateway = gateway
        self._state = SessionState()
        self._observers: list[StateObserver] = []
        self._unsubscribe: Unsubscribe | None = None
        # Bumped on every identity event; stale profile fetches are dropped
        self._generation = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._unsubscribe is not None

    def observe(self, observer: StateObserver) -> Callable[[], None]:
        """Register a reader notified with every new state.

        Returns:
            Disposer that removes the observer
        """
        self._observers.append(observer)

        def dispose() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return dispose

    def _assign(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for observer in list(self._observers):
            observer(self._state)

    async def start(self) -> None:
        """Subscribe to identity changes. Calling twice is a no-op.

        Subscription failures propagate: without identity events there is
        no session.
        """
        if self._unsubscribe is not None:
            return
        self._unsubscribe = await self._identity.subscribe(self._on_identity)
        logger.info("session.started")

    async def stop(self) -> None:
        """Release the identity subscription."""
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        logger.info("session.stopped")

    async def _on_identity(self, identity: Identity | None) -> None:
        self._generation += 1
        generation = self._generation

        if identity is None:
            self._assign(identity=None, profile=None, is_loading=False)
            return

        # Never show another user's profile while the new one loads; with
        # nothing cached for this uid the session is loading again
        cached = self._state.profile
        if cached is not None and cached.id != identity.uid:
            cached = None
        self._assign(identity=identity, profile=cached, is_loading=cached is None)

        profile = await self._fetch_profile(identity.uid)

        if generation != self._generation:
            logger.debug("session.stale_profile_dropped", uid=identity.uid)
            return

        self._assign(profile=profile, is_loading=False)

    async def _fetch_profile(self, uid: str) -> Account | None:
        """Read the Account for ``uid``; a failed read degrades to None."""
        try:
            profile = await self._gateway.get("accounts", uid)
        except PersistenceError as e:
            logger.error("session.profile_fetch_failed", uid=uid, error=str(e))
            return None

        if profile is None:
            logger.warning("session.profile_missing", uid=uid)
        else:
            logger.debug("session.profile_loaded", uid=uid, has_degree=profile.has_degree)
        return profile

    async def update_profile(self, **fields: Any) -> Account | None:
        """Write profile fields, then re-read and replace the cached profile.

        Raises:
            Unauthorized: If nobody is signed in
            ValidationError: If a field is unknown or immutable
            PersistenceError: If the write fails
        """
        identity = self._state.identity
        if identity is None:
            raise Unauthorized("Sign in to update your profile")

        await self._gateway.update("accounts", identity.uid, fields)
        profile = await self._gateway.get("accounts", identity.uid)

        # Signed out or switched user while the write was in flight
        if self._state.identity is not identity:
            return profile

        self._assign(profile=profile)
        logger.info("session.profile_updated", uid=identity.uid, fields=sorted(fields))
        return profile

    async def sign_up(
        self, email: str, password: str, display_name: str | None = None
    ) -> Identity:
        return await self._identity.sign_up(email, password, display_name)

    async def sign_in(self, email: str, password: str) -> Identity:
        return await self._identity.sign_in(email, password)

    async def sign_out(self) -> None:
        await self._identity.sign_out()
