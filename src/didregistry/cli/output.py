"""Output helpers shared by CLI commands."""

from __future__ import annotations

import json
import sys
from typing import Any

from ..core.exceptions import RegistryException


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_error(error: RegistryException, as_json: bool = False) -> int:
    """Print a tagged registry error and return the failure exit code."""
    if as_json:
        print(json.dumps(error.to_dict()))
    else:
        print(f"❌ {error.code}: {error.message}", file=sys.stderr)
    return 1
