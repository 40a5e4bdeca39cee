"""Registry events.

Every successful state change appends one event to the store's event log.
The log is append-only; failed operations and capped claim additions
emit nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class RegistryEventKind(StrEnum):
    """State changes that produce an event."""

    IDENTITY_CREATED = "identity_created"
    DID_UPDATED = "did_updated"
    CLAIM_ADDED = "claim_added"
    CLAIM_VERIFIED = "claim_verified"
    VERIFICATION_STATUS_UPDATED = "verification_status_updated"


@dataclass(frozen=True)
class RegistryEvent:
    """A single entry of the event log."""

    kind: RegistryEventKind
    principal: str
    block: int
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "principal": self.principal,
            "block": self.block,
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegistryEvent:
        return cls(
            kind=RegistryEventKind(data["kind"]),
            principal=data["principal"],
            block=int(data["block"]),
            data=dict(data.get("data", {})),
        )
