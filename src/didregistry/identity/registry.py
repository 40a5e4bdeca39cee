"""Identity registry — the serialized state machine.

:class:`IdentityRegistry` owns the identity store, the verified-claim
store and the creation counter. Each public method is one atomic
transaction: all checks run first, then the store is mutated under a
single lock, so readers only ever observe committed state.

Caller principals and logical timestamps (``now``, typically a block
height) are supplied by the hosting environment; the registry never
derives either itself.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from ..core.exceptions import (
    AlreadyExistsError,
    ConfigException,
    InvalidUserError,
    NotAuthorizedError,
    NotFoundError,
    RegistryException,
)
from ..core.logging import operation_logger
from .events import RegistryEvent, RegistryEventKind
from .models import IdentityRecord, validate_claim, validate_did
from .store import InMemoryRegistryStore, RegistryStore

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Registry of principal identities, claims and verifications.

    Typical workflow::

        registry = IdentityRegistry(owner="0xowner")

        registry.create("0xalice", "did:example:alice", now=1)
        registry.add_claim("0xalice", "KYC level 2", now=2)

        # Owner-only
        registry.verify_claim("0xowner", "0xalice", "KYC level 2", now=3)
        registry.set_verification_status("0xowner", "0xalice", True, now=4)

        registry.is_claim_verified("0xalice", "KYC level 2")  # True
    """

    def __init__(self, owner: str | None = None, store: RegistryStore | None = None) -> None:
        if owner is None:
            from ..core.config import get_config

            owner = get_config().owner
        if not owner:
            raise ConfigException(
                "Registry owner is not configured",
                missing_vars=["DIDREGISTRY_OWNER"],
            )
        self._owner = owner
        self._store: Any = store or InMemoryRegistryStore()
        self._lock = threading.RLock()

    @property
    def owner(self) -> str:
        """The principal allowed to run verification operations."""
        return self._owner

    @property
    def store(self) -> RegistryStore:
        return self._store

    @contextmanager
    def _transaction(self, operation: str, **arguments: Any) -> Generator[None, None, None]:
        with self._lock:
            operation_logger.log_call(operation, arguments)
            try:
                yield
            except RegistryException as e:
                operation_logger.log_result(operation, False, e.code)
                raise
            operation_logger.log_result(operation, True)

    def _require_owner(self, caller: str, operation: str) -> None:
        if caller != self._owner:
            logger.warning(f"Rejected {operation} from non-owner {caller}")
            raise NotAuthorizedError(caller, operation)

    def _emit(self, kind: RegistryEventKind, principal: str, now: int, **data: Any) -> None:
        self._store.append_event(RegistryEvent(kind=kind, principal=principal, block=now, data=data))

    # -- Identity store -----------------------------------------------------

    def create(self, principal: str, did: str, *, now: int) -> None:
        """Register a new identity for ``principal``.

        Raises:
            AlreadyExistsError: If ``principal`` already has an identity.
            InvalidDidError: If ``did`` is not 1-100 characters.
        """
        with self._transaction("create", principal=principal, did=did):
            if self._store.get_identity(principal) is not None:
                raise AlreadyExistsError(principal)
            validate_did(did)

            self._store.save_identity(principal, IdentityRecord(did=did, created_at=now, updated_at=now))
            total = self._store.increment_count()
            self._emit(RegistryEventKind.IDENTITY_CREATED, principal, now, did=did)
            logger.info(f"Identity created for {principal} ({total} total)")

    def update_did(self, principal: str, new_did: str, *, now: int) -> None:
        """Replace the DID of an existing identity.

        Raises:
            NotFoundError: If ``principal`` has no identity.
            InvalidDidError: If ``new_did`` is not 1-100 characters.
        """
        with self._transaction("update_did", principal=principal, new_did=new_did):
            record = self._store.get_identity(principal)
            if record is None:
                raise NotFoundError(principal)
            validate_did(new_did)

            updated = record.copy()
            updated.did = new_did
            updated.updated_at = now
            self._store.save_identity(principal, updated)
            self._emit(RegistryEventKind.DID_UPDATED, principal, now, did=new_did)
            logger.info(f"DID updated for {principal}")

    def add_claim(self, principal: str, claim: str, *, now: int) -> None:
        """Append a claim to the identity's claim list.

        Once the list holds ten claims further calls still succeed but
        change nothing, ``updated_at`` included.

        Raises:
            NotFoundError: If ``principal`` has no identity.
            InvalidClaimError: If ``claim`` is not 1-200 characters.
        """
        with self._transaction("add_claim", principal=principal, claim=claim):
            record = self._store.get_identity(principal)
            if record is None:
                raise NotFoundError(principal)
            validate_claim(claim)

            updated = record.copy()
            if not updated.claims.append(claim):
                logger.info(f"Claim list full for {principal}; claim ignored")
                return
            updated.updated_at = now
            self._store.save_identity(principal, updated)
            self._emit(RegistryEventKind.CLAIM_ADDED, principal, now, claim=claim)

    def set_verification_status(self, caller: str, principal: str, status: bool, *, now: int) -> None:
        """Set the verification flag of an identity (owner only).

        Raises:
            NotAuthorizedError: If ``caller`` is not the owner.
            InvalidUserError: If ``principal`` has no identity.
        """
        with self._transaction("set_verification_status", caller=caller, principal=principal, status=status):
            self._require_owner(caller, "set_verification_status")
            record = self._store.get_identity(principal)
            if record is None:
                raise InvalidUserError(principal)

            updated = record.copy()
            updated.verification_status = bool(status)
            updated.updated_at = now
            self._store.save_identity(principal, updated)
            self._emit(RegistryEventKind.VERIFICATION_STATUS_UPDATED, principal, now, status=bool(status))
            logger.info(f"Verification status of {principal} set to {bool(status)}")

    # -- Claim verification store -------------------------------------------

    def verify_claim(self, caller: str, principal: str, claim: str, *, now: int) -> None:
        """Mark ``claim`` as verified for ``principal`` (owner only).

        The claim does not have to appear in the identity's own claim list.
        Re-verifying is a no-op success and emits no event.

        Raises:
            NotAuthorizedError: If ``caller`` is not the owner.
            InvalidUserError: If ``principal`` has no identity.
            InvalidClaimError: If ``claim`` is not 1-200 characters.
        """
        with self._transaction("verify_claim", caller=caller, principal=principal, claim=claim):
            self._require_owner(caller, "verify_claim")
            if self._store.get_identity(principal) is None:
                raise InvalidUserError(principal)
            validate_claim(claim)

            if self._store.get_claim_verification(principal, claim):
                logger.debug(f"Claim already verified for {principal}")
                return

            self._store.set_claim_verification(principal, claim, True)
            self._emit(RegistryEventKind.CLAIM_VERIFIED, principal, now, claim=claim)
            logger.info(f"Claim verified for {principal}")

    def is_claim_verified(self, principal: str, claim: str) -> bool:
        """Return whether ``claim`` was verified for ``principal``. Never fails."""
        with self._lock:
            return self._store.get_claim_verification(principal, claim)

    # -- Counter ------------------------------------------------------------

    def count(self) -> int:
        """Number of identities ever created."""
        with self._lock:
            return self._store.get_count()

    # -- Read accessors -----------------------------------------------------

    def get_identity(self, principal: str) -> IdentityRecord | None:
        """Return a snapshot of the identity, or ``None`` if absent.

        Unlike :meth:`get_all_claims` and :meth:`is_identity_verified`
        this does not raise for an unknown principal.
        """
        with self._lock:
            record = self._store.get_identity(principal)
            return record.copy() if record is not None else None

    def get_all_claims(self, principal: str) -> list[str]:
        """Return the identity's claims in insertion order.

        Raises:
            NotFoundError: If ``principal`` has no identity.
        """
        with self._lock:
            record = self._store.get_identity(principal)
            if record is None:
                raise NotFoundError(principal)
            return record.claims.to_list()

    def is_identity_verified(self, principal: str) -> bool:
        """Return the identity's verification flag.

        Raises:
            NotFoundError: If ``principal`` has no identity.
        """
        with self._lock:
            record = self._store.get_identity(principal)
            if record is None:
                raise NotFoundError(principal)
            return record.verification_status

    def events(self, principal: str | None = None) -> list[RegistryEvent]:
        """Return the event log, optionally filtered by principal."""
        with self._lock:
            return self._store.list_events(principal=principal)
