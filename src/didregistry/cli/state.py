"""JSON persistence of the CLI's registry host.

The state file holds the fixed owner, the current block height, the
nonces of applied calls and a snapshot of the registry store.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from ..core.config import get_config
from ..core.exceptions import ConfigException
from ..identity.host import RegistryHost
from ..identity.principals import private_key_from_hex
from ..identity.registry import IdentityRegistry
from ..identity.store import InMemoryRegistryStore

logger = logging.getLogger(__name__)


def resolve_state_path(store: str | None) -> Path:
    """Return the state file path from ``--store`` or config."""
    if store:
        return Path(store).expanduser()
    return get_config().state_path


def deploy_state(owner: str, store: str | None = None) -> RegistryHost:
    """Create a fresh registry owned by ``owner`` and persist it.

    Raises:
        ConfigException: If a registry is already deployed at the path.
    """
    path = resolve_state_path(store)
    if path.exists():
        raise ConfigException(f"Registry already deployed at {path}")
    host = RegistryHost(IdentityRegistry(owner=owner))
    save_host(host, store)
    logger.info(f"Deployed registry owned by {owner} at {path}")
    return host


def load_host(store: str | None = None) -> RegistryHost:
    """Load the registry host from the state file.

    Raises:
        ConfigException: If nothing is deployed at the path or the file is malformed.
    """
    path = resolve_state_path(store)
    if not path.exists():
        raise ConfigException(f"No registry deployed at {path}; run 'didregistry deploy' first")
    try:
        data = json.loads(path.read_text())
        registry = IdentityRegistry(
            owner=data["owner"],
            store=InMemoryRegistryStore.from_dict(data.get("store", {})),
        )
        return RegistryHost(
            registry,
            height=int(data.get("height", 0)),
            seen_nonces=data.get("nonces", []),
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise ConfigException(f"Malformed state file {path}: {e}") from e


def save_host(host: RegistryHost, store: str | None = None) -> None:
    """Write the host's state to the state file.

    The snapshot goes to a temporary file in the same directory which then
    replaces the state file, so an interrupted save leaves the previous
    state intact.
    """
    path = resolve_state_path(store)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "owner": host.registry.owner,
        "height": host.height,
        "nonces": sorted(host.seen_nonces),
        "store": host.registry.store.to_dict(),
    }
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


def load_key(key_path: str):
    """Load an Ed25519 private key from a hex key file.

    Raises:
        ConfigException: If the file is missing or not a valid key.
    """
    path = Path(key_path).expanduser()
    try:
        return private_key_from_hex(path.read_text())
    except FileNotFoundError as e:
        raise ConfigException(f"Key file not found: {path}") from e
    except ValueError as e:
        raise ConfigException(f"Invalid key file {path}: {e}") from e
