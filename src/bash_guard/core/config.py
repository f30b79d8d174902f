"""bash-guard configuration.

Defines the validated configuration model consumed by the guard, the
rule store, and the host integration.
"""
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONFIG_PATH = Path.home() / ".pi" / "agent" / "extensions" / "bash-guard.json"
"""Where persistent rule sets live unless configured otherwise."""

DEFAULT_BLOCKED_PREFIXES: tuple[str, ...] = ("gcloud", "kubectl")
"""Blocked when no persisted configuration exists yet."""


class GuardConfig(BaseModel):
    """Configuration for a bash-guard instance.

    All fields carry defaults so that ``GuardConfig()`` is a working
    configuration for a single-user install.
    """

    model_config = ConfigDict(strict=True)

    config_path: Path = Field(
        default=DEFAULT_CONFIG_PATH,
        description="JSON file holding the persistent rule sets.",
    )
    default_blocked_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_BLOCKED_PREFIXES),
        description=(
            "Prefixes blocked when storage is absent or unreadable."
        ),
    )
    guarded_tool_name: str = Field(
        default="bash",
        min_length=1,
        description="Name of the agent tool whose calls are evaluated.",
    )
    blocked_exit_code: int = Field(
        default=1,
        ge=1,
        description="Exit code reported for a refused user command.",
    )
    status_key: str = Field(
        default="pi-bash-guard",
        description=(
            "Host status-bar key owned by the guard; cleared at session "
            "start."
        ),
    )
