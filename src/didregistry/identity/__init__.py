"""Identity registry — DIDs, bounded claim lists and owner verification.

Each principal registers at most one identity: a DID plus up to ten
claims. A single fixed owner may mark claims (keyed by literal text)
and whole identities as verified.

Key concepts:
- **IdentityRecord**: DID, verification flag, claims, timestamps.
- **ClaimList**: Append-only list that silently ignores claims past ten.
- **IdentityRegistry**: The serialized state machine and its auth gate.
- **RegistryHost**: Authenticates signed calls and supplies block heights.
"""

from didregistry.identity.events import RegistryEvent, RegistryEventKind
from didregistry.identity.host import RegistryHost
from didregistry.identity.models import (
    MAX_CLAIM_LENGTH,
    MAX_CLAIMS,
    MAX_DID_LENGTH,
    ClaimList,
    IdentityRecord,
)
from didregistry.identity.principals import SignedCall, authenticate, principal_from_public_key, sign_call
from didregistry.identity.registry import IdentityRegistry
from didregistry.identity.store import InMemoryRegistryStore, RegistryStore

__all__ = [
    "MAX_CLAIMS",
    "MAX_CLAIM_LENGTH",
    "MAX_DID_LENGTH",
    "ClaimList",
    "IdentityRecord",
    "IdentityRegistry",
    "InMemoryRegistryStore",
    "RegistryEvent",
    "RegistryEventKind",
    "RegistryHost",
    "RegistryStore",
    "SignedCall",
    "authenticate",
    "principal_from_public_key",
    "sign_call",
]
