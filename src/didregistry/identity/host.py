"""Execution host for the registry.

The registry trusts whoever calls it to supply the caller principal and
the current logical time. :class:`RegistryHost` plays that role: it
authenticates signed calls, orders them, stamps each one with the next
block height and dispatches it to the registry.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Any

from ..core.exceptions import NotAuthorizedError, ValidationException
from ..core.logging import transaction_context
from .principals import SignedCall, authenticate
from .registry import IdentityRegistry

logger = logging.getLogger(__name__)

# operation -> required argument names
OPERATIONS: dict[str, tuple[str, ...]] = {
    "create": ("did",),
    "update_did": ("new_did",),
    "add_claim": ("claim",),
    "verify_claim": ("principal", "claim"),
    "set_verification_status": ("principal", "status"),
}


class RegistryHost:
    """Applies signed calls to an :class:`IdentityRegistry` one at a time.

    Applied nonces are kept for the lifetime of the registry, like the
    registry's own event log. Calls carry no expiry, so forgetting a
    nonce would make its call replayable; the set is therefore never
    pruned and is persisted whole with the rest of the state.

    Args:
        registry: The registry to drive.
        height: Block height of the last applied transaction.
        seen_nonces: Nonces of already-applied calls (replay protection).
    """

    def __init__(
        self,
        registry: IdentityRegistry,
        height: int = 0,
        seen_nonces: Iterable[str] = (),
    ) -> None:
        self._registry = registry
        self._height = height
        self._seen_nonces: set[str] = set(seen_nonces)
        self._lock = threading.Lock()

    @property
    def registry(self) -> IdentityRegistry:
        return self._registry

    @property
    def height(self) -> int:
        return self._height

    @property
    def seen_nonces(self) -> set[str]:
        return set(self._seen_nonces)

    def submit(self, call: SignedCall) -> int:
        """Authenticate and apply ``call``.

        Only successful calls advance the block height and consume their
        nonce.

        Returns:
            The block height at which the call was applied.

        Raises:
            NotAuthorizedError: Bad signature or replayed nonce.
            ValidationException: Unknown operation, missing or mistyped arguments.
            RegistryException: Any error raised by the registry itself.
        """
        with self._lock:
            sender = authenticate(call)
            now = self._height + 1
            with transaction_context(block=now, sender=sender):
                if call.nonce in self._seen_nonces:
                    raise NotAuthorizedError(sender, call.operation, reason=f"Replayed call nonce {call.nonce}")

                handler = self._dispatch(call, sender)
                handler(now)

                self._height = now
                self._seen_nonces.add(call.nonce)
                logger.info(f"Applied {call.operation} from {sender}")
                return now

    def _dispatch(self, call: SignedCall, sender: str) -> Callable[[int], None]:
        required = OPERATIONS.get(call.operation)
        if required is None:
            raise ValidationException(f"Unknown operation: {call.operation}", field="operation", value=call.operation)
        missing = [name for name in required if name not in call.args]
        if missing:
            raise ValidationException(
                f"Missing arguments for {call.operation}: {', '.join(missing)}",
                field=missing[0],
            )

        args: dict[str, Any] = call.args
        registry = self._registry
        if call.operation == "create":
            return lambda now: registry.create(sender, args["did"], now=now)
        if call.operation == "update_did":
            return lambda now: registry.update_did(sender, args["new_did"], now=now)
        if call.operation == "add_claim":
            return lambda now: registry.add_claim(sender, args["claim"], now=now)
        if call.operation == "verify_claim":
            return lambda now: registry.verify_claim(sender, args["principal"], args["claim"], now=now)

        status = args["status"]
        if not isinstance(status, bool):
            raise ValidationException("Verification status must be a boolean", field="status", value=status)
        return lambda now: registry.set_verification_status(sender, args["principal"], status, now=now)
