"""Process-start wiring.

Every gateway is constructed once here and handed to consumers by
reference; nothing else creates stores, providers or controllers.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from trackacademia.auth.firebase_provider import FirebaseIdentityProvider
from trackacademia.auth.identity import IdentityGateway
from trackacademia.auth.memory_provider import MemoryIdentityProvider
from trackacademia.auth.provider import IdentityProvider
from trackacademia.config.app_config import (
    AppConfig,
    AuthConfig,
    StoreConfig,
    UploadConfig,
    load_app_config,
)
from trackacademia.core.uploads import CloudinaryUploader, CoverUploader
from trackacademia.db.gateway import DataAccessGateway
from trackacademia.db.memory_store import MemoryDocumentStore
from trackacademia.db.store import DocumentStore
from trackacademia.session.controller import SessionController

logger = structlog.get_logger(__name__)


@dataclass
class Services:
    """Shared instances for the lifetime of the process."""

    config: AppConfig
    gateway: DataAccessGateway
    identity: IdentityGateway
    session: SessionController
    uploader: CoverUploader | None = None

    async def start(self) -> None:
        await self.session.start()

    async def aclose(self) -> None:
        """Stop the session and release clients."""
        await self.session.stop()
        await self.identity.provider.close()
        if self.uploader is not None:
            await self.uploader.close()
        await self.gateway.store.close()


def build_store(config: StoreConfig) -> DocumentStore:
    """Create the configured document store backend."""
    if config.backend == "memory":
        return MemoryDocumentStore()
    if config.backend == "firestore":
        from trackacademia.db.firestore_store import FirestoreDocumentStore

        return FirestoreDocumentStore(
            project_id=config.project_id, database=config.database
        )
    raise ValueError(f"Unknown store backend: {config.backend}")


def build_identity_provider(config: AuthConfig) -> IdentityProvider:
    """Create the configured identity provider."""
    if config.backend == "memory":
        return MemoryIdentityProvider()
    if config.backend == "firebase":
        api_key = config.get_api_key()
        if not api_key:
            raise ValueError(
                f"Firebase auth selected but ${config.api_key_env} is not set"
            )
        return FirebaseIdentityProvider(
            api_key=api_key, base_url=config.base_url, timeout=config.timeout
        )
    raise ValueError(f"Unknown auth backend: {config.backend}")


def build_uploader(config: UploadConfig) -> CoverUploader | None:
    """Create the configured cover uploader, None when uploads are disabled."""
    if config.backend == "disabled":
        return None
    if config.backend == "cloudinary":
        return CloudinaryUploader(config)
    raise ValueError(f"Unknown upload backend: {config.backend}")


def build_services(
    config: AppConfig | None = None,
    store: DocumentStore | None = None,
    provider: IdentityProvider | None = None,
    uploader: CoverUploader | None = None,
) -> Services:
    """Wire gateways, controller and uploader.

    Args:
        config: Application config (default: load_app_config())
        store: Override the configured store backend
        provider: Override the configured identity provider
        uploader: Override the configured uploader
    """
    config = config or load_app_config()

    gateway = DataAccessGateway(store or build_store(config.store))
    identity = IdentityGateway(provider or build_identity_provider(config.auth), gateway)
    session = SessionController(identity, gateway)
    if uploader is None:
        uploader = build_uploader(config.uploads)

    logger.info(
        "services.built",
        store=type(gateway.store).__name__,
        provider=type(identity.provider).__name__,
        uploads=type(uploader).__name__ if uploader else None,
    )
    return Services(
        config=config,
        gateway=gateway,
        identity=identity,
        session=session,
        uploader=uploader,
    )
