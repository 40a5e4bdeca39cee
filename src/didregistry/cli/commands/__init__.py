"""CLI command modules for didregistry.

Each module exposes a ``register(subparsers)`` function that wires up
its argparse sub-commands and sets ``parser.set_defaults(func=handler)``.
"""

from . import identity, keys, queries
from .identity import cmd_add_claim, cmd_create, cmd_set_verified, cmd_update_did, cmd_verify_claim
from .keys import cmd_deploy, cmd_keygen, cmd_whoami
from .queries import cmd_claim_verified, cmd_claims, cmd_count, cmd_events, cmd_show, cmd_verified

# All command modules with register() functions, in registration order.
COMMAND_MODULES = [
    keys,
    identity,
    queries,
]

__all__ = [
    "COMMAND_MODULES",
    "cmd_add_claim",
    "cmd_claim_verified",
    "cmd_claims",
    "cmd_count",
    "cmd_create",
    "cmd_deploy",
    "cmd_events",
    "cmd_keygen",
    "cmd_set_verified",
    "cmd_show",
    "cmd_update_did",
    "cmd_verified",
    "cmd_verify_claim",
    "cmd_whoami",
]
