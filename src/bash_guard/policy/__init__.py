"""Prefix policy for bash-guard.

This subpackage implements rule compilation and the two-layer decision
engine:

* **PrefixRule** / **compile_rule** -- canonical, tokenized prefix rules.
* **is_prefix_match** / **matching_rules** -- positional prefix matching.
* **decide_layer** / **find_blocked_invocations** -- specificity-based
  layer verdicts composed session-first, then persistent.
* **RuleSets** -- the four rule sets held per session.
"""
from __future__ import annotations

from bash_guard.policy.decision import (
    CompiledLayer,
    LayerDecision,
    decide_layer,
    find_blocked_invocations,
    is_blocked_by_persistent_rules,
    max_token_count,
    most_specific_prefixes,
    resolve_invocation,
)
from bash_guard.policy.formatting import (
    PERMIT_HINT,
    RESOLUTION_ORDER,
    blocked_reason,
    format_blocked_invocations,
    format_list,
    format_reset,
    format_status,
)
from bash_guard.policy.rules import (
    PrefixRule,
    build_rules,
    canonicalize_prefix,
    compile_rule,
    is_prefix_match,
    matching_rules,
    require_canonical_prefix,
)
from bash_guard.policy.state import RuleSets

__all__ = [
    "PERMIT_HINT",
    "RESOLUTION_ORDER",
    "CompiledLayer",
    "LayerDecision",
    "PrefixRule",
    "RuleSets",
    "blocked_reason",
    "build_rules",
    "canonicalize_prefix",
    "compile_rule",
    "decide_layer",
    "find_blocked_invocations",
    "format_blocked_invocations",
    "format_list",
    "format_reset",
    "format_status",
    "is_blocked_by_persistent_rules",
    "is_prefix_match",
    "matching_rules",
    "max_token_count",
    "most_specific_prefixes",
    "require_canonical_prefix",
    "resolve_invocation",
]
