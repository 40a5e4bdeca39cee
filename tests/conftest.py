"""Global test fixtures for the didregistry test suite."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from didregistry.core.config import clear_config_cache
from didregistry.identity.principals import principal_from_public_key, private_key_to_hex
from didregistry.identity.registry import IdentityRegistry

OWNER = "0xowner"
ALICE = "0xalice"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all DIDREGISTRY_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("DIDREGISTRY_"):
            monkeypatch.delenv(key, raising=False)
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def isolated_home(monkeypatch, tmp_path: Path, clean_env):
    """Point the state file at a temporary directory."""
    state_file = tmp_path / "state.json"
    monkeypatch.setenv("DIDREGISTRY_STATE_FILE", str(state_file))
    clear_config_cache()
    return state_file


# ============================================================================
# Registry Fixtures
# ============================================================================


@pytest.fixture
def registry() -> IdentityRegistry:
    return IdentityRegistry(owner=OWNER)


@pytest.fixture
def alice_registry(registry: IdentityRegistry) -> IdentityRegistry:
    """Registry with ALICE registered at block 1."""
    registry.create(ALICE, "did:example:alice", now=1)
    return registry


# ============================================================================
# Key Fixtures
# ============================================================================


@pytest.fixture
def owner_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


@pytest.fixture
def alice_key() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


@pytest.fixture
def owner_principal(owner_key: Ed25519PrivateKey) -> str:
    return principal_from_public_key(owner_key.public_key())


@pytest.fixture
def alice_principal(alice_key: Ed25519PrivateKey) -> str:
    return principal_from_public_key(alice_key.public_key())


@pytest.fixture
def key_files(tmp_path: Path, owner_key: Ed25519PrivateKey, alice_key: Ed25519PrivateKey) -> dict[str, str]:
    """Write owner and alice keys to disk; return their paths."""
    paths = {}
    for name, key in (("owner", owner_key), ("alice", alice_key)):
        path = tmp_path / f"{name}.key"
        path.write_text(private_key_to_hex(key))
        paths[name] = str(path)
    return paths
