"""Key and deployment commands."""

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

from ...core.config import get_config
from ...core.exceptions import ConfigException, RegistryException
from ...identity.principals import generate_key, principal_from_public_key, private_key_to_hex
from ..output import print_error
from ..state import deploy_state, load_key


def cmd_keygen(args: argparse.Namespace) -> int:
    """Generate an Ed25519 key and print its principal."""
    path = Path(args.out).expanduser()
    if path.exists() and not args.force:
        return print_error(ConfigException(f"Refusing to overwrite {path} (use --force)"), args.json)

    key = generate_key()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(private_key_to_hex(key) + "\n")
    os.chmod(path, 0o600)
    principal = principal_from_public_key(key.public_key())

    if args.json:
        print(json.dumps({"principal": principal, "key_file": str(path)}))
    else:
        print(f"🔑 Key written to {path}")
        print(f"   Principal: {principal}")
    return 0


def cmd_whoami(args: argparse.Namespace) -> int:
    """Print the principal of a key file."""
    try:
        key = load_key(args.key)
    except RegistryException as e:
        return print_error(e, args.json)

    principal = principal_from_public_key(key.public_key())
    if args.json:
        print(json.dumps({"principal": principal}))
    else:
        print(principal)
    return 0


def cmd_deploy(args: argparse.Namespace) -> int:
    """Initialize a registry with its fixed owner."""
    try:
        if args.owner_key:
            owner = principal_from_public_key(load_key(args.owner_key).public_key())
        else:
            owner = args.owner or get_config().owner
        if not owner:
            raise ConfigException(
                "No owner given. Use --owner, --owner-key or DIDREGISTRY_OWNER.",
                missing_vars=["DIDREGISTRY_OWNER"],
            )
        deploy_state(owner, args.store)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print(json.dumps({"owner": owner}))
    else:
        print(f"✅ Registry deployed, owner {owner}")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register key and deployment commands."""
    keygen_parser = subparsers.add_parser("keygen", help="Generate a signing key")
    keygen_parser.add_argument("--out", "-o", required=True, help="Key file to write")
    keygen_parser.add_argument("--force", action="store_true", help="Overwrite an existing key file")
    keygen_parser.set_defaults(func=cmd_keygen)

    whoami_parser = subparsers.add_parser("whoami", help="Show the principal of a key")
    whoami_parser.add_argument("--key", "-k", required=True, help="Key file")
    whoami_parser.set_defaults(func=cmd_whoami)

    deploy_parser = subparsers.add_parser("deploy", help="Initialize a registry with its owner")
    owner_group = deploy_parser.add_mutually_exclusive_group()
    owner_group.add_argument("--owner", help="Owner principal (default: DIDREGISTRY_OWNER)")
    owner_group.add_argument("--owner-key", help="Key file whose principal becomes the owner")
    deploy_parser.set_defaults(func=cmd_deploy)
