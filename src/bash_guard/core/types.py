"""bash-guard shared domain types.

This module defines the value types, enums, and Pydantic models shared
across the package.

Key design decisions:
* ``PersistedGuardConfig`` mirrors the on-disk JSON layout, so its fields
  carry the camelCase aliases used in the file.
* Results handed back to the host (``ToolCallBlock``, ``UserBashResult``)
  are Pydantic models so they serialise cleanly to JSON.
* Enums use *string* values so they serialise cleanly to JSON.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NotifyLevel(enum.StrEnum):
    """Severity of a message shown to the operator."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LayerAction(enum.StrEnum):
    """Verdict of a single policy layer.

    * **PERMIT** -- the layer allows the invocation; evaluation stops.
    * **BLOCK** -- the layer blocks the invocation; evaluation stops.
    * **NONE** -- no rule in the layer matched; defer to the next layer.
    """

    PERMIT = "permit"
    BLOCK = "block"
    NONE = "none"


# ---------------------------------------------------------------------------
# Storage payloads
# ---------------------------------------------------------------------------

class PersistedGuardConfig(BaseModel):
    """The JSON document persisted between sessions.

    Either field may be missing.  A value that is not an array is treated
    the same as a missing field.
    """

    model_config = ConfigDict(strict=True, populate_by_name=True)

    blocked_prefixes: list[str] | None = Field(
        default=None,
        alias="blockedPrefixes",
    )
    permitted_prefixes: list[str] | None = Field(
        default=None,
        alias="permittedPrefixes",
    )

    @field_validator("blocked_prefixes", "permitted_prefixes", mode="before")
    @classmethod
    def _ignore_non_arrays(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value
        return None


@dataclass
class LoadedRules:
    """Result of loading persisted rule sets.

    Attributes
    ----------
    blocked_prefixes:
        Persistent block prefixes as stored, not yet canonicalized.
    permitted_prefixes:
        Persistent permit prefixes as stored, not yet canonicalized.
    existed:
        ``False`` when no stored configuration was found.
    error:
        Raw error text when the stored configuration was unusable and
        defaults were substituted.
    """

    blocked_prefixes: list[str] = field(default_factory=list)
    permitted_prefixes: list[str] = field(default_factory=list)
    existed: bool = True
    error: str | None = None


# ---------------------------------------------------------------------------
# Evaluation results
# ---------------------------------------------------------------------------

class BlockedInvocation(BaseModel):
    """One blocked shell segment.

    ``matched_blocks`` lists the block prefixes that tied for the highest
    specificity in the layer that made the decision.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    invocation: str
    matched_blocks: list[str] = Field(default_factory=list)


class ToolCallBlock(BaseModel):
    """Returned to the host to veto an agent tool call."""

    model_config = ConfigDict(strict=True)

    block: Literal[True] = True
    reason: str


class BashExecutionResult(BaseModel):
    """A synthetic execution result standing in for a refused command."""

    model_config = ConfigDict(strict=True)

    output: str
    exit_code: int = Field(ge=1)
    cancelled: bool = False
    truncated: bool = False


class UserBashResult(BaseModel):
    """Returned to the host in place of running a user-typed command."""

    model_config = ConfigDict(strict=True)

    result: BashExecutionResult
