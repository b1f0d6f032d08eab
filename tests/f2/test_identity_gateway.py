"""Tests for IdentityGateway and the memory identity provider (F2)."""

from unittest.mock import AsyncMock

import pytest

from trackacademia.auth.identity import IdentityGateway
from trackacademia.auth.memory_provider import MemoryIdentityProvider
from trackacademia.errors import (
    AccountAlreadyExists,
    InvalidCredentials,
    PersistenceError,
    WeakPassword,
)


@pytest.fixture
def identity(gateway):
    return IdentityGateway(MemoryIdentityProvider(), gateway)


class TestSubscribe:
    """Tests for identity-change subscriptions."""

    @pytest.mark.asyncio
    async def test_emits_current_immediately(self, identity):
        """New subscribers receive the current value (None when signed out)."""
        seen = []
        await identity.subscribe(seen.append)
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_async_listener(self, identity):
        seen = []

        async def listener(value):
            seen.append(value)

        await identity.subscribe(listener)
        await identity.sign_up("a@b.co", "secret1")
        assert seen[0] is None
        assert seen[1].email == "a@b.co"

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_events(self, identity):
        seen = []
        unsubscribe = await identity.subscribe(seen.append)
        unsubscribe()
        await identity.sign_up("a@b.co", "secret1")
        assert seen == [None]

    @pytest.mark.asyncio
    async def test_failing_listener_not_registered(self, identity):
        def broken(_):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            await identity.subscribe(broken)

        # Later events do not reach the broken listener
        await identity.sign_up("a@b.co", "secret1")


class TestSignUp:
    """Tests for account creation."""

    @pytest.mark.asyncio
    async def test_sign_up_provisions_account(self, identity, gateway):
        """Account is keyed by uid with email, display name and no degree."""
        created = await identity.sign_up("Alice@Example.com", "secret1", "Alice")

        account = await gateway.get("accounts", created.uid)
        assert account is not None
        assert account.email == "alice@example.com"
        assert account.display_name == "Alice"
        assert account.degree is None
        assert identity.current == created

    @pytest.mark.asyncio
    async def test_account_exists_before_listeners_run(self, identity, gateway):
        found = []

        async def listener(value):
            if value is not None:
                found.append(await gateway.get("accounts", value.uid))

        await identity.subscribe(listener)
        await identity.sign_up("a@b.co", "secret1")
        assert found and found[0] is not None

    @pytest.mark.asyncio
    async def test_duplicate_email(self, identity):
        await identity.sign_up("a@b.co", "secret1")
        with pytest.raises(AccountAlreadyExists) as exc_info:
            await identity.sign_up("A@B.co", "secret2")
        assert exc_info.value.code == "EMAIL_EXISTS"

    @pytest.mark.asyncio
    async def test_weak_password(self, identity):
        with pytest.raises(WeakPassword):
            await identity.sign_up("a@b.co", "123")
        assert identity.current is None

    @pytest.mark.asyncio
    async def test_invalid_email(self, identity):
        with pytest.raises(InvalidCredentials):
            await identity.sign_up("not-an-email", "secret1")

    @pytest.mark.asyncio
    async def test_provisioning_failure_is_best_effort(self, identity, gateway):
        """Identity is still created and signed in when the profile write fails."""
        gateway.create = AsyncMock(side_effect=PersistenceError("down", "accounts"))

        created = await identity.sign_up("a@b.co", "secret1")

        assert identity.current == created
        gateway.create.assert_awaited_once()


class TestSignInOut:
    """Tests for sign-in and sign-out."""

    @pytest.mark.asyncio
    async def test_sign_in_after_sign_up(self, identity):
        created = await identity.sign_up("a@b.co", "secret1")
        await identity.sign_out()
        assert identity.current is None

        signed_in = await identity.sign_in("a@b.co", "secret1")
        assert signed_in.uid == created.uid
        assert identity.current == signed_in

    @pytest.mark.asyncio
    async def test_wrong_password(self, identity):
        await identity.sign_up("a@b.co", "secret1")
        await identity.sign_out()
        with pytest.raises(InvalidCredentials):
            await identity.sign_in("a@b.co", "wrong-password")
        assert identity.current is None

    @pytest.mark.asyncio
    async def test_unknown_email(self, identity):
        with pytest.raises(InvalidCredentials):
            await identity.sign_in("nobody@b.co", "secret1")

    @pytest.mark.asyncio
    async def test_sign_out_emits_none(self, identity):
        seen = []
        await identity.sign_up("a@b.co", "secret1")
        await identity.subscribe(seen.append)
        await identity.sign_out()
        assert seen[-1] is None

    @pytest.mark.asyncio
    async def test_sign_out_when_signed_out_is_noop(self, identity):
        seen = []
        await identity.subscribe(seen.append)
        await identity.sign_out()
        assert seen == [None]
