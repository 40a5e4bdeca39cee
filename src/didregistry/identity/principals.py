"""Principals and signed calls.

A principal is the address of an actor: ``0x`` followed by the last 20
bytes of the SHA-256 digest of its raw Ed25519 public key. A
:class:`SignedCall` is a registry operation signed by the sender's key;
:func:`authenticate` turns it back into the sender principal, which is
what the host passes to the registry as the caller.
"""

from __future__ import annotations

import hashlib
import json
import secrets
from dataclasses import dataclass, field
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from ..core.exceptions import NotAuthorizedError

# ---------------------------------------------------------------------------
# Keys and addresses
# ---------------------------------------------------------------------------


def public_key_bytes(pub: Ed25519PublicKey) -> bytes:
    """Extract raw 32-byte public key."""
    return pub.public_bytes(Encoding.Raw, PublicFormat.Raw)


def principal_from_public_key(pub: Ed25519PublicKey | bytes) -> str:
    """Derive the ``0x…`` principal address of a public key."""
    raw = pub if isinstance(pub, bytes) else public_key_bytes(pub)
    return "0x" + hashlib.sha256(raw).digest()[-20:].hex()


def generate_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


def private_key_to_hex(key: Ed25519PrivateKey) -> str:
    return key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption()).hex()


def private_key_from_hex(key_hex: str) -> Ed25519PrivateKey:
    return Ed25519PrivateKey.from_private_bytes(bytes.fromhex(key_hex.strip()))


# ---------------------------------------------------------------------------
# SignedCall
# ---------------------------------------------------------------------------


@dataclass
class SignedCall:
    """A registry operation signed by its sender.

    Attributes:
        operation: Registry method name (e.g. ``"add_claim"``).
        args: Keyword arguments of the operation, excluding caller and time.
        public_key: Sender's raw Ed25519 public key.
        nonce: Random hex nonce; the host refuses to apply a nonce twice.
        signature: Signature over :meth:`statement`.
    """

    operation: str
    args: dict[str, Any] = field(default_factory=dict)
    public_key: bytes = b""
    nonce: str = field(default_factory=lambda: secrets.token_hex(16))
    signature: bytes = b""

    @property
    def sender(self) -> str:
        """Principal claimed by this call (unauthenticated until verified)."""
        return principal_from_public_key(self.public_key)

    def statement(self) -> bytes:
        """Canonical bytes the sender signs."""
        payload = json.dumps(
            {"operation": self.operation, "args": self.args, "nonce": self.nonce},
            sort_keys=True,
            separators=(",", ":"),
        )
        return hashlib.sha256(payload.encode()).digest()

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "args": self.args,
            "public_key": self.public_key.hex(),
            "nonce": self.nonce,
            "signature": self.signature.hex(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SignedCall:
        return cls(
            operation=data["operation"],
            args=dict(data.get("args", {})),
            public_key=bytes.fromhex(data["public_key"]),
            nonce=data["nonce"],
            signature=bytes.fromhex(data["signature"]),
        )


def sign_call(private_key: Ed25519PrivateKey, operation: str, args: dict[str, Any] | None = None) -> SignedCall:
    """Build and sign a call on behalf of ``private_key``'s principal."""
    call = SignedCall(
        operation=operation,
        args=dict(args or {}),
        public_key=public_key_bytes(private_key.public_key()),
    )
    call.signature = private_key.sign(call.statement())
    return call


def authenticate(call: SignedCall) -> str:
    """Verify ``call``'s signature and return the sender principal.

    Raises:
        NotAuthorizedError: If the key is malformed or the signature is invalid.
    """
    try:
        pub = Ed25519PublicKey.from_public_bytes(call.public_key)
        pub.verify(call.signature, call.statement())
    except (ValueError, InvalidSignature) as e:
        raise NotAuthorizedError(
            None,
            call.operation,
            reason=f"Signature check failed for {call.operation}",
        ) from e
    return principal_from_public_key(call.public_key)
