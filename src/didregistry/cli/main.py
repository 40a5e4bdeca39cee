#!/usr/bin/env python3
"""
didregistry CLI - register DIDs, attach claims, verify them.

Commands:
  didregistry keygen -o alice.key          Generate a signing key
  didregistry deploy --owner-key owner.key Initialize a registry
  didregistry create <did> -k alice.key    Register your identity
  didregistry add-claim <claim> -k KEY     Add a claim
  didregistry verify-claim <p> <claim> -k OWNER_KEY
  didregistry show <principal>             Show an identity
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..core.logging import configure_logging
from .commands import COMMAND_MODULES

logger = logging.getLogger(__name__)


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="didregistry",
        description="Decentralized-identity registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  didregistry keygen -o owner.key                 Owner signing key
  didregistry deploy --owner-key owner.key        Fix the registry owner
  didregistry keygen -o alice.key
  didregistry create did:example:alice -k alice.key
  didregistry add-claim "KYC level 2" -k alice.key
  didregistry verify-claim 0x... "KYC level 2" -k owner.key
  didregistry set-verified 0x... true -k owner.key
  didregistry claim-verified 0x... "KYC level 2"

Environment Variables:
  DIDREGISTRY_OWNER         Default owner principal for deploy
  DIDREGISTRY_STATE_FILE    State file (default: ~/.didregistry/state.json)
  DIDREGISTRY_LOG_LEVEL     Log level (default: INFO)
  DIDREGISTRY_LOG_FORMAT    "json" or "text"
        """,
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--store", "-s", help="State file (overrides DIDREGISTRY_STATE_FILE)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    configure_logging(level="DEBUG" if args.verbose else None, json_format=False if args.verbose else None)

    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())
