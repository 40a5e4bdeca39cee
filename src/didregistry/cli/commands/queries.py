"""Read-only registry commands."""

from __future__ import annotations

import argparse

from ...core.exceptions import RegistryException
from ..output import print_error, print_json
from ..state import load_host


def cmd_show(args: argparse.Namespace) -> int:
    """Show an identity. An unknown principal is not an error."""
    try:
        registry = load_host(args.store).registry
    except RegistryException as e:
        return print_error(e, args.json)

    record = registry.get_identity(args.principal)
    if args.json:
        print_json(record.to_dict() if record is not None else None)
        return 0
    if record is None:
        print(f"No identity registered for {args.principal}")
        return 0

    print(f"🪪 {args.principal}")
    print(f"   DID:      {record.did}")
    print(f"   Verified: {'yes' if record.verification_status else 'no'}")
    print(f"   Created:  block {record.created_at}")
    print(f"   Updated:  block {record.updated_at}")
    print(f"   Claims:   {len(record.claims)}/{record.claims.capacity}")
    for i, claim in enumerate(record.claims, 1):
        mark = "✓" if registry.is_claim_verified(args.principal, claim) else " "
        print(f"     {i:>2}. [{mark}] {claim}")
    return 0


def cmd_claims(args: argparse.Namespace) -> int:
    """List an identity's claims."""
    try:
        claims = load_host(args.store).registry.get_all_claims(args.principal)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print_json(claims)
    elif not claims:
        print("No claims.")
    else:
        for claim in claims:
            print(claim)
    return 0


def cmd_claim_verified(args: argparse.Namespace) -> int:
    """Check whether a claim of a principal has been verified."""
    try:
        verified = load_host(args.store).registry.is_claim_verified(args.principal, args.claim)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print_json({"principal": args.principal, "claim": args.claim, "verified": verified})
    else:
        print("true" if verified else "false")
    return 0


def cmd_verified(args: argparse.Namespace) -> int:
    """Check whether an identity has been verified."""
    try:
        verified = load_host(args.store).registry.is_identity_verified(args.principal)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print_json({"principal": args.principal, "verified": verified})
    else:
        print("true" if verified else "false")
    return 0


def cmd_count(args: argparse.Namespace) -> int:
    """Print the number of identities ever created."""
    try:
        host = load_host(args.store)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print_json({"count": host.registry.count(), "height": host.height})
    else:
        print(host.registry.count())
    return 0


def cmd_events(args: argparse.Namespace) -> int:
    """Print the event log."""
    try:
        events = load_host(args.store).registry.events(principal=args.principal)
    except RegistryException as e:
        return print_error(e, args.json)

    if args.json:
        print_json([e.to_dict() for e in events])
        return 0
    if not events:
        print("No events.")
        return 0
    for event in events:
        details = ", ".join(f"{k}={v}" for k, v in event.data.items())
        print(f"#{event.block:<6} {event.kind.value:<28} {event.principal}  {details}")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register read-only commands."""
    show_parser = subparsers.add_parser("show", help="Show an identity")
    show_parser.add_argument("principal", help="Principal to look up")
    show_parser.set_defaults(func=cmd_show)

    claims_parser = subparsers.add_parser("claims", help="List an identity's claims")
    claims_parser.add_argument("principal", help="Principal to look up")
    claims_parser.set_defaults(func=cmd_claims)

    claim_verified_parser = subparsers.add_parser("claim-verified", help="Check a claim's verification")
    claim_verified_parser.add_argument("principal", help="Principal the claim is about")
    claim_verified_parser.add_argument("claim", help="Claim text")
    claim_verified_parser.set_defaults(func=cmd_claim_verified)

    verified_parser = subparsers.add_parser("verified", help="Check an identity's verification")
    verified_parser.add_argument("principal", help="Principal to look up")
    verified_parser.set_defaults(func=cmd_verified)

    count_parser = subparsers.add_parser("count", help="Number of identities created")
    count_parser.set_defaults(func=cmd_count)

    events_parser = subparsers.add_parser("events", help="Show the event log")
    events_parser.add_argument("--principal", "-p", help="Only events for this principal")
    events_parser.set_defaults(func=cmd_events)
