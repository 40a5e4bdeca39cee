"""Identity mutation commands.

Each command signs a call with ``--key`` and applies it through the
registry host, so the caller principal is always the key's principal.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from ...core.exceptions import RegistryException
from ...identity.principals import sign_call
from ..output import print_error
from ..state import load_host, load_key, save_host


def _submit(args: argparse.Namespace, operation: str, call_args: dict[str, Any]) -> int:
    try:
        key = load_key(args.key)
        host = load_host(args.store)
        call = sign_call(key, operation, call_args)
        block = host.submit(call)
        save_host(host, args.store)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print(json.dumps({"operation": operation, "sender": call.sender, "block": block}))
    else:
        print(f"✅ {operation} applied at block {block} (sender {call.sender})")
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    """Register an identity for the key's principal."""
    return _submit(args, "create", {"did": args.did})


def cmd_update_did(args: argparse.Namespace) -> int:
    """Replace the DID of the key's identity."""
    return _submit(args, "update_did", {"new_did": args.did})


def cmd_add_claim(args: argparse.Namespace) -> int:
    """Add a claim to the key's identity.

    Past ten claims the call still succeeds but nothing is stored.
    """
    return _submit(args, "add_claim", {"claim": args.claim})


def cmd_verify_claim(args: argparse.Namespace) -> int:
    """Mark a claim of a principal as verified (owner only)."""
    return _submit(args, "verify_claim", {"principal": args.principal, "claim": args.claim})


def cmd_set_verified(args: argparse.Namespace) -> int:
    """Set the verification status of a principal (owner only)."""
    return _submit(
        args,
        "set_verification_status",
        {"principal": args.principal, "status": args.status == "true"},
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register identity mutation commands."""
    create_parser = subparsers.add_parser("create", help="Register your identity")
    create_parser.add_argument("did", help="DID (1-100 characters)")
    create_parser.add_argument("--key", "-k", required=True, help="Sender key file")
    create_parser.set_defaults(func=cmd_create)

    update_parser = subparsers.add_parser("update-did", help="Replace your DID")
    update_parser.add_argument("did", help="New DID (1-100 characters)")
    update_parser.add_argument("--key", "-k", required=True, help="Sender key file")
    update_parser.set_defaults(func=cmd_update_did)

    claim_parser = subparsers.add_parser("add-claim", help="Add a claim to your identity")
    claim_parser.add_argument("claim", help="Claim text (1-200 characters)")
    claim_parser.add_argument("--key", "-k", required=True, help="Sender key file")
    claim_parser.set_defaults(func=cmd_add_claim)

    verify_parser = subparsers.add_parser("verify-claim", help="Verify a claim (owner only)")
    verify_parser.add_argument("principal", help="Principal the claim is about")
    verify_parser.add_argument("claim", help="Claim text (1-200 characters)")
    verify_parser.add_argument("--key", "-k", required=True, help="Owner key file")
    verify_parser.set_defaults(func=cmd_verify_claim)

    status_parser = subparsers.add_parser("set-verified", help="Set identity verification (owner only)")
    status_parser.add_argument("principal", help="Principal to update")
    status_parser.add_argument("status", choices=["true", "false"], help="New verification status")
    status_parser.add_argument("--key", "-k", required=True, help="Owner key file")
    status_parser.set_defaults(func=cmd_set_verified)
