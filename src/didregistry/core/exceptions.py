# SPDX-License-Identifier: MIT
# Copyright (c) 2026 didregistry Contributors

"""Custom exception hierarchy for the DID registry.

Every registry failure is a tagged, recoverable error: the ``code``
attribute carries the stable error tag (``NotAuthorized``, ``NotFound``,
...) so callers can branch on it without matching class names.
"""

from __future__ import annotations

from typing import Any


class RegistryException(Exception):  # noqa: N818
    """Base exception for all registry errors."""

    code: str = "RegistryError"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RegistryException):
    """Exception for input validation errors.

    Raised when:
    - Text length is out of the allowed range
    - An unknown operation is submitted to the host
    """

    code = "ValidationError"

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigException(RegistryException):
    """Exception for configuration errors.

    Raised when:
    - No owner principal is configured
    - The state file is unreadable or malformed
    """

    code = "ConfigError"

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []


class NotAuthorizedError(RegistryException):
    """Caller is not allowed to perform the operation."""

    code = "NotAuthorized"

    def __init__(self, caller: str | None, operation: str, reason: str | None = None):
        message = reason or f"{caller} is not authorized to call {operation}"
        super().__init__(message, {"caller": caller, "operation": operation})
        self.caller = caller
        self.operation = operation


class AlreadyExistsError(RegistryException):
    """An identity is already registered for the principal."""

    code = "AlreadyExists"

    def __init__(self, principal: str):
        super().__init__(f"Identity already exists: {principal}", {"principal": principal})
        self.principal = principal


class NotFoundError(RegistryException):
    """No identity is registered for the principal.

    Raised by the self-service and read paths that are required to fail on
    a missing principal (``update_did``, ``add_claim``, ``get_all_claims``,
    ``is_identity_verified``).
    """

    code = "NotFound"

    def __init__(self, principal: str):
        super().__init__(f"Identity not found: {principal}", {"principal": principal})
        self.principal = principal


class InvalidUserError(RegistryException):
    """Owner-only operation addressed a principal without an identity."""

    code = "InvalidUser"

    def __init__(self, principal: str):
        super().__init__(f"Invalid user: {principal}", {"principal": principal})
        self.principal = principal


class InvalidDidError(ValidationException):
    """DID text length is outside the allowed range."""

    code = "InvalidDid"

    def __init__(self, did: str, max_length: int):
        super().__init__(
            f"DID must be between 1 and {max_length} characters (got {len(did)})",
            field="did",
            value=did,
        )


class InvalidClaimError(ValidationException):
    """Claim text length is outside the allowed range."""

    code = "InvalidClaim"

    def __init__(self, claim: str, max_length: int):
        super().__init__(
            f"Claim must be between 1 and {max_length} characters (got {len(claim)})",
            field="claim",
            value=claim,
        )
