"""bash-guard error-code hierarchy.

Hierarchy
---------
::

    BashGuardError
    +-- RuleError      (BG-E1xx)
    +-- StorageError   (BG-E2xx)
    +-- PolicyError    (BG-E3xx)

Usage
-----
Raise concrete subclasses directly::

    raise InvalidPrefix("sudo -u root")

Catch by category::

    try:
        ...
    except StorageError:
        # handles StorageReadFailure and StorageWriteFailure
        ...
"""
from __future__ import annotations

from typing import Any

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class BashGuardError(Exception):
    """Base exception for all bash-guard errors.

    Attributes
    ----------
    code : str
        Error code, e.g. ``"BG-E100"``.
    message : str
        Human-readable description.
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    resolution : str
        Suggested action for the operator.
    """

    code: str = "BG-E000"
    message: str = "Unknown bash-guard error"
    resolution: str = ""

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        resolution: str | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        if resolution is not None:
            self.resolution = resolution
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ===================================================================
# Category base classes
# ===================================================================

class RuleError(BashGuardError):
    """BG-E1xx -- Prefix rule compilation errors."""

    code = "BG-E1XX"


class StorageError(BashGuardError):
    """BG-E2xx -- Persisted rule storage errors."""

    code = "BG-E2XX"


class PolicyError(BashGuardError):
    """BG-E3xx -- Policy evaluation and command surface errors."""

    code = "BG-E3XX"


# ===================================================================
# BG-E1xx  Rule Errors
# ===================================================================

class InvalidPrefix(RuleError):
    """BG-E100 -- A raw prefix normalizes to no effective command."""

    code = "BG-E100"
    message = "Prefix does not name an effective command"
    resolution = (
        "Provide a prefix that starts with a command, e.g. "
        "'kubectl delete'.  Wrappers and environment assignments alone "
        "are not valid prefixes."
    )


# ===================================================================
# BG-E2xx  Storage Errors
# ===================================================================

class StorageReadFailure(StorageError):
    """BG-E200 -- The persisted rule file could not be read or parsed."""

    code = "BG-E200"
    message = "Persisted guard config could not be read"
    resolution = (
        "Fix or remove the config file.  Built-in defaults are in use "
        "until then."
    )


class StorageWriteFailure(StorageError):
    """BG-E201 -- The persisted rule file could not be written."""

    code = "BG-E201"
    message = "Persisted guard config could not be written"
    resolution = (
        "Check permissions on the config directory.  The in-memory rules "
        "were left unchanged."
    )


# ===================================================================
# BG-E3xx  Policy Errors
# ===================================================================

class CommandBlocked(PolicyError):
    """BG-E300 -- At least one invocation in a command is blocked."""

    code = "BG-E300"
    message = "Command blocked by bash-guard prefix rules"
    resolution = "Use /bash-guard-permit <prefix> to allow in this session."


class UnknownCommand(PolicyError):
    """BG-E301 -- A policy command name is not registered."""

    code = "BG-E301"
    message = "Unknown bash-guard command"
    resolution = "Run /bash-guard-status to see the active rules."
