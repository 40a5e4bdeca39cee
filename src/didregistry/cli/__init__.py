# SPDX-License-Identifier: MIT
# Copyright (c) 2026 didregistry Contributors

"""didregistry CLI - identity registry management."""

from .main import app, main

__all__ = ["main", "app"]
