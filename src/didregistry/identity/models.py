"""Identity records and claim lists for the registry.

An :class:`IdentityRecord` is created once per principal and never deleted.
Its claims live in a :class:`ClaimList`, a fixed-capacity, append-only
sequence: once full, further appends are ignored rather than rejected.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.exceptions import InvalidClaimError, InvalidDidError

MAX_DID_LENGTH = 100
MAX_CLAIM_LENGTH = 200
MAX_CLAIMS = 10


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_did(did: str) -> str:
    """Return ``did`` unchanged or raise :class:`InvalidDidError`."""
    if not isinstance(did, str) or not 1 <= len(did) <= MAX_DID_LENGTH:
        raise InvalidDidError(str(did), MAX_DID_LENGTH)
    return did


def validate_claim(claim: str) -> str:
    """Return ``claim`` unchanged or raise :class:`InvalidClaimError`."""
    if not isinstance(claim, str) or not 1 <= len(claim) <= MAX_CLAIM_LENGTH:
        raise InvalidClaimError(str(claim), MAX_CLAIM_LENGTH)
    return claim


# ---------------------------------------------------------------------------
# ClaimList
# ---------------------------------------------------------------------------


class ClaimList(Sequence[str]):
    """Append-only sequence of claims with a hard capacity.

    ``append`` past capacity is a silent no-op that returns ``False``.
    There is no removal operation.
    """

    __slots__ = ("_items", "_capacity")

    def __init__(self, claims: Iterable[str] = (), capacity: int = MAX_CLAIMS) -> None:
        self._capacity = capacity
        self._items: list[str] = []
        for claim in claims:
            self.append(claim)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self._capacity

    def append(self, claim: str) -> bool:
        """Append ``claim`` if there is room.

        Returns:
            ``True`` if the claim was stored, ``False`` if the list was full.
        """
        if self.is_full:
            return False
        self._items.append(claim)
        return True

    def __getitem__(self, index):  # type: ignore[override]
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ClaimList):
            return self._items == other._items
        if isinstance(other, (list, tuple)):
            return self._items == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ClaimList({self._items!r}, capacity={self._capacity})"

    def to_list(self) -> list[str]:
        return list(self._items)


# ---------------------------------------------------------------------------
# IdentityRecord
# ---------------------------------------------------------------------------


@dataclass
class IdentityRecord:
    """The registry entry of one principal.

    Attributes:
        did: Opaque identifier chosen by the principal (1-100 characters).
        verification_status: Set only by the registry owner.
        claims: Up to ten claims in insertion order.
        created_at: Logical timestamp (block height) of creation.
        updated_at: Logical timestamp of the last successful mutation.
    """

    did: str
    created_at: int
    updated_at: int
    verification_status: bool = False
    claims: ClaimList = field(default_factory=ClaimList)

    def copy(self) -> IdentityRecord:
        """Return a detached copy that shares no mutable state."""
        return IdentityRecord(
            did=self.did,
            created_at=self.created_at,
            updated_at=self.updated_at,
            verification_status=self.verification_status,
            claims=ClaimList(self.claims),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "did": self.did,
            "verification_status": self.verification_status,
            "claims": self.claims.to_list(),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> IdentityRecord:
        return cls(
            did=data["did"],
            created_at=int(data["created_at"]),
            updated_at=int(data.get("updated_at", data["created_at"])),
            verification_status=bool(data.get("verification_status", False)),
            claims=ClaimList(data.get("claims", [])),
        )
