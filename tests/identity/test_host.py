"""Tests for RegistryHost: authenticated, ordered application of signed calls."""

from __future__ import annotations

import logging

import pytest

from didregistry.core.exceptions import (
    InvalidDidError,
    NotAuthorizedError,
    NotFoundError,
    ValidationException,
)
from didregistry.core.logging import current_transaction
from didregistry.identity.host import RegistryHost
from didregistry.identity.principals import sign_call
from didregistry.identity.registry import IdentityRegistry


@pytest.fixture()
def host(owner_principal: str) -> RegistryHost:
    return RegistryHost(IdentityRegistry(owner=owner_principal))


class TestSubmit:
    def test_caller_is_signer(self, host: RegistryHost, alice_key, alice_principal):
        host.submit(sign_call(alice_key, "create", {"did": "did:example:alice"}))
        record = host.registry.get_identity(alice_principal)
        assert record is not None
        assert record.did == "did:example:alice"

    def test_block_height_advances(self, host: RegistryHost, alice_key, alice_principal):
        assert host.submit(sign_call(alice_key, "create", {"did": "did:a"})) == 1
        assert host.submit(sign_call(alice_key, "add_claim", {"claim": "X"})) == 2
        assert host.submit(sign_call(alice_key, "update_did", {"new_did": "did:b"})) == 3

        record = host.registry.get_identity(alice_principal)
        assert record.created_at == 1
        assert record.updated_at == 3
        assert host.height == 3

    def test_owner_operations(self, host: RegistryHost, alice_key, alice_principal, owner_key):
        host.submit(sign_call(alice_key, "create", {"did": "did:a"}))
        host.submit(sign_call(owner_key, "verify_claim", {"principal": alice_principal, "claim": "X"}))
        host.submit(sign_call(owner_key, "set_verification_status", {"principal": alice_principal, "status": True}))

        assert host.registry.is_claim_verified(alice_principal, "X") is True
        assert host.registry.is_identity_verified(alice_principal) is True

    def test_non_owner_cannot_verify(self, host: RegistryHost, alice_key, alice_principal):
        host.submit(sign_call(alice_key, "create", {"did": "did:a"}))
        with pytest.raises(NotAuthorizedError):
            host.submit(sign_call(alice_key, "verify_claim", {"principal": alice_principal, "claim": "X"}))
        assert host.registry.is_claim_verified(alice_principal, "X") is False

    def test_failed_call_does_not_advance(self, host: RegistryHost, alice_key):
        with pytest.raises(NotFoundError):
            host.submit(sign_call(alice_key, "add_claim", {"claim": "X"}))
        with pytest.raises(InvalidDidError):
            host.submit(sign_call(alice_key, "create", {"did": ""}))
        assert host.height == 0
        assert host.seen_nonces == set()

    def test_replay_rejected(self, host: RegistryHost, alice_key):
        call = sign_call(alice_key, "create", {"did": "did:a"})
        host.submit(call)
        with pytest.raises(NotAuthorizedError):
            host.submit(call)
        assert host.height == 1

    def test_forged_call_rejected(self, host: RegistryHost, alice_key):
        call = sign_call(alice_key, "create", {"did": "did:a"})
        call.args["did"] = "did:forged"
        with pytest.raises(NotAuthorizedError):
            host.submit(call)
        assert host.registry.count() == 0

    def test_unknown_operation(self, host: RegistryHost, alice_key):
        with pytest.raises(ValidationException) as exc_info:
            host.submit(sign_call(alice_key, "delete_identity", {}))
        assert exc_info.value.field == "operation"

    def test_missing_argument(self, host: RegistryHost, alice_key):
        with pytest.raises(ValidationException) as exc_info:
            host.submit(sign_call(alice_key, "verify_claim", {"claim": "X"}))
        assert exc_info.value.field == "principal"

    def test_resumes_from_height_and_nonces(self, owner_principal, alice_key):
        call = sign_call(alice_key, "create", {"did": "did:a"})
        host = RegistryHost(IdentityRegistry(owner=owner_principal), height=41, seen_nonces=[call.nonce])
        with pytest.raises(NotAuthorizedError):
            host.submit(call)
        assert host.submit(sign_call(alice_key, "create", {"did": "did:a"})) == 42

    @pytest.mark.parametrize("status", ["false", "true", 0, 1, [0], None])
    def test_non_boolean_status_rejected(self, host: RegistryHost, alice_key, alice_principal, owner_key, status):
        host.submit(sign_call(alice_key, "create", {"did": "did:a"}))
        call = sign_call(owner_key, "set_verification_status", {"principal": alice_principal, "status": status})

        with pytest.raises(ValidationException) as exc_info:
            host.submit(call)

        assert exc_info.value.field == "status"
        assert exc_info.value.value == status
        assert host.registry.is_identity_verified(alice_principal) is False
        assert host.height == 1
        assert call.nonce not in host.seen_nonces

    def test_false_status_clears_verification(self, host: RegistryHost, alice_key, alice_principal, owner_key):
        host.submit(sign_call(alice_key, "create", {"did": "did:a"}))
        host.submit(sign_call(owner_key, "set_verification_status", {"principal": alice_principal, "status": True}))
        host.submit(sign_call(owner_key, "set_verification_status", {"principal": alice_principal, "status": False}))
        assert host.registry.is_identity_verified(alice_principal) is False

    def test_applied_nonces_never_expire(self, host: RegistryHost, alice_key):
        first = sign_call(alice_key, "create", {"did": "did:a"})
        host.submit(first)
        for i in range(200):
            host.submit(sign_call(alice_key, "update_did", {"new_did": f"did:a:{i}"}))

        with pytest.raises(NotAuthorizedError):
            host.submit(first)
        assert host.height == 201
        assert len(host.seen_nonces) == 201


class TestTransactionLogging:
    def test_log_lines_carry_block_and_sender(self, host: RegistryHost, alice_key, alice_principal, caplog):
        seen = []

        class Capture(logging.Handler):
            def emit(self, record):
                seen.append(current_transaction())

        handler = Capture(level=logging.INFO)
        host_logger = logging.getLogger("didregistry.identity.host")
        host_logger.addHandler(handler)
        try:
            with caplog.at_level(logging.INFO, logger="didregistry.identity.host"):
                host.submit(sign_call(alice_key, "create", {"did": "did:a"}))
        finally:
            host_logger.removeHandler(handler)

        assert seen
        assert seen[-1].block == 1
        assert seen[-1].sender == alice_principal
        assert current_transaction() is None
