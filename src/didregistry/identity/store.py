"""Storage for registry state.

The registry keeps three independent pieces of state plus an event log:

- identities: principal -> :class:`IdentityRecord`
- verified claims: (principal, claim text) -> bool, deliberately separate
  from each record's own claim list
- the creation counter

Storage is pluggable through :class:`RegistryStore`; the in-memory backend
serializes to a plain dict so the CLI can persist it as JSON.
"""

from __future__ import annotations

from typing import Any, Protocol

from .events import RegistryEvent
from .models import IdentityRecord

# ---------------------------------------------------------------------------
# Storage protocol
# ---------------------------------------------------------------------------


class RegistryStore(Protocol):
    """Abstract storage backend for registry state."""

    def get_identity(self, principal: str) -> IdentityRecord | None: ...
    def save_identity(self, principal: str, record: IdentityRecord) -> None: ...
    def list_principals(self) -> list[str]: ...
    def get_claim_verification(self, principal: str, claim: str) -> bool: ...
    def set_claim_verification(self, principal: str, claim: str, verified: bool) -> None: ...
    def get_count(self) -> int: ...
    def increment_count(self) -> int: ...
    def append_event(self, event: RegistryEvent) -> None: ...
    def list_events(self, principal: str | None = None) -> list[RegistryEvent]: ...
    def to_dict(self) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# In-memory store (default / tests / CLI)
# ---------------------------------------------------------------------------


class InMemoryRegistryStore:
    """Simple in-memory implementation of :class:`RegistryStore`."""

    def __init__(self) -> None:
        self._identities: dict[str, IdentityRecord] = {}
        self._verified_claims: dict[tuple[str, str], bool] = {}
        self._count = 0
        self._events: list[RegistryEvent] = []

    # -- identities --

    def get_identity(self, principal: str) -> IdentityRecord | None:
        return self._identities.get(principal)

    def save_identity(self, principal: str, record: IdentityRecord) -> None:
        self._identities[principal] = record

    def list_principals(self) -> list[str]:
        return list(self._identities)

    # -- verified claims --

    def get_claim_verification(self, principal: str, claim: str) -> bool:
        return self._verified_claims.get((principal, claim), False)

    def set_claim_verification(self, principal: str, claim: str, verified: bool) -> None:
        self._verified_claims[(principal, claim)] = verified

    # -- counter --

    def get_count(self) -> int:
        return self._count

    def increment_count(self) -> int:
        self._count += 1
        return self._count

    # -- events --

    def append_event(self, event: RegistryEvent) -> None:
        self._events.append(event)

    def list_events(self, principal: str | None = None) -> list[RegistryEvent]:
        events = list(self._events)
        if principal is not None:
            events = [e for e in events if e.principal == principal]
        return events

    # -- serialisation --

    def to_dict(self) -> dict[str, Any]:
        return {
            "identities": {p: r.to_dict() for p, r in self._identities.items()},
            "verified_claims": [
                {"principal": p, "claim": c, "verified": v}
                for (p, c), v in self._verified_claims.items()
            ],
            "count": self._count,
            "events": [e.to_dict() for e in self._events],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InMemoryRegistryStore:
        store = cls()
        for principal, record_data in data.get("identities", {}).items():
            store._identities[principal] = IdentityRecord.from_dict(record_data)
        for entry in data.get("verified_claims", []):
            store._verified_claims[(entry["principal"], entry["claim"])] = bool(entry["verified"])
        store._count = int(data.get("count", len(store._identities)))
        store._events = [RegistryEvent.from_dict(e) for e in data.get("events", [])]
        return store
