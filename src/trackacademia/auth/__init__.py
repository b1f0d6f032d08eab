"""Identity: provider adapters and the identity gateway."""

from trackacademia.auth.firebase_provider import FirebaseIdentityProvider
from trackacademia.auth.identity import IdentityGateway, IdentityListener, Unsubscribe
from trackacademia.auth.memory_provider import MemoryIdentityProvider
from trackacademia.auth.provider import IdentityProvider, validate_email

__all__ = [
    "FirebaseIdentityProvider",
    "IdentityGateway",
    "IdentityListener",
    "IdentityProvider",
    "MemoryIdentityProvider",
    "Unsubscribe",
    "validate_email",
]
