"""Human-readable rendering of rule sets and decisions."""
from __future__ import annotations

from collections.abc import Iterable

from bash_guard.core.types import BlockedInvocation
from bash_guard.policy.state import RuleSets

PERMIT_HINT = "Use /bash-guard-permit <prefix> to allow in this session."

RESOLUTION_ORDER = (
    "Resolution order: session rules first, then persistent rules; within "
    "each layer, more specific prefix wins, ties go to permit."
)


def format_list(values: Iterable[str]) -> str:
    """Join unique *values* in sorted order, or ``(none)`` when empty."""
    items = sorted(set(values))
    return ", ".join(items) if items else "(none)"


def format_blocked_invocations(blocked: list[BlockedInvocation]) -> str:
    return "; ".join(
        f"{entry.invocation} (matched: {' | '.join(entry.matched_blocks)})"
        for entry in blocked
    )


def blocked_reason(blocked: list[BlockedInvocation]) -> str:
    """Build the reason shown to the agent or user for a refused command."""
    return (
        f"Blocked bash invocation(s): {format_blocked_invocations(blocked)}. "
        f"{PERMIT_HINT}"
    )


def format_status(rule_sets: RuleSets) -> str:
    """Render all four rule sets plus the resolution-order rule."""
    lines = [
        f"Persistent blocks: {format_list(rule_sets.persistent_blocked)}",
        f"Persistent permits: {format_list(rule_sets.persistent_permitted)}",
        f"Session blocks: {format_list(rule_sets.session_blocked)}",
        f"Session permits: {format_list(rule_sets.session_permitted)}",
        RESOLUTION_ORDER,
    ]
    return "\n".join(lines)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def format_reset(permits: int, blocks: int) -> str:
    """Describe a session reset that cleared *permits* and *blocks*."""
    if permits + blocks == 0:
        return "No session guard overrides to reset."
    return (
        f"Reset session guard overrides (cleared {_plural(permits, 'permit')}, "
        f"{_plural(blocks, 'block')})."
    )
