# SPDX-License-Identifier: MIT
# Copyright (c) 2026 didregistry Contributors

"""didregistry - decentralized-identity registry.

Principals register a DID, attach up to ten textual claims, and a single
fixed owner marks claims or whole identities as verified.

Architecture:
  IdentityRegistry (serialized state machine, owner auth gate)
    -> RegistryStore (identities, verified-claim ledger, counter, events)
  RegistryHost (signed calls -> caller principal + block height)
    -> IdentityRegistry

CLI entry point: ``didregistry``
"""

__version__ = "0.1.0"

from . import (
    core as core,
)
from . import (
    identity as identity,
)
