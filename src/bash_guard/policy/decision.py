"""Permit/block decision engine.

Resolution order
----------------
1. **Session layer** -- session permits and blocks.  A decisive verdict
   (permit or block) ends evaluation.
2. **Persistent layer** -- consulted only when the session layer has no
   matching rule.

Within a layer the most specific matching rule (most tokens) wins and a
tie goes to permit.  Layers never compare specificity with each other.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from bash_guard.core.types import BlockedInvocation, LayerAction
from bash_guard.parsing.normalizer import normalize_invocation_tokens
from bash_guard.parsing.segmenter import split_shell_segments
from bash_guard.parsing.tokenizer import tokenize_shell_words
from bash_guard.policy.rules import PrefixRule, build_rules, matching_rules
from bash_guard.policy.state import RuleSets

# ---------------------------------------------------------------------------
# Layer decisions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LayerDecision:
    """Verdict of one layer for one invocation."""

    action: LayerAction
    matched_blocks: tuple[str, ...] = ()


_NO_DECISION = LayerDecision(action=LayerAction.NONE)
_PERMITTED = LayerDecision(action=LayerAction.PERMIT)


def max_token_count(rules: list[PrefixRule]) -> int:
    """Return the highest token count in *rules*, or ``-1`` when empty."""
    if not rules:
        return -1
    return max(rule.token_count for rule in rules)


def most_specific_prefixes(rules: list[PrefixRule]) -> tuple[str, ...]:
    """Return the prefixes of every rule tied for the highest token count."""
    longest = max_token_count(rules)
    if longest < 0:
        return ()
    return tuple(rule.prefix for rule in rules if rule.token_count == longest)


def decide_layer(
    permit_matches: list[PrefixRule],
    block_matches: list[PrefixRule],
) -> LayerDecision:
    """Decide one layer from its matching permit and block rules."""
    permit_len = max_token_count(permit_matches)
    block_len = max_token_count(block_matches)

    if permit_len < 0 and block_len < 0:
        return _NO_DECISION

    # Equal specificity favors permit.
    if permit_len >= block_len:
        return _PERMITTED

    return LayerDecision(
        action=LayerAction.BLOCK,
        matched_blocks=most_specific_prefixes(block_matches),
    )


# ---------------------------------------------------------------------------
# Compiled layers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CompiledLayer:
    """The compiled permit and block rules of one layer."""

    permit_rules: list[PrefixRule] = field(default_factory=list)
    block_rules: list[PrefixRule] = field(default_factory=list)

    @classmethod
    def compile(cls, permitted: set[str], blocked: set[str]) -> CompiledLayer:
        return cls(permit_rules=build_rules(permitted), block_rules=build_rules(blocked))

    def decide(self, invocation_tokens: list[str]) -> LayerDecision:
        return decide_layer(
            matching_rules(invocation_tokens, self.permit_rules),
            matching_rules(invocation_tokens, self.block_rules),
        )


def resolve_invocation(
    invocation_tokens: list[str],
    session: CompiledLayer,
    persistent: CompiledLayer,
) -> BlockedInvocation | None:
    """Run both layers for one invocation; return a record if it is blocked."""
    decision = session.decide(invocation_tokens)
    if decision.action is LayerAction.NONE:
        decision = persistent.decide(invocation_tokens)

    if decision.action is not LayerAction.BLOCK:
        return None

    return BlockedInvocation(
        invocation=" ".join(invocation_tokens),
        matched_blocks=list(decision.matched_blocks),
    )


# ---------------------------------------------------------------------------
# Whole-command evaluation
# ---------------------------------------------------------------------------


def find_blocked_invocations(command: str, rule_sets: RuleSets) -> list[BlockedInvocation]:
    """Return one record per blocked segment of *command*.

    An empty list means the whole command is allowed.  Segments that hold
    no effective command (only assignments or wrappers) are ignored.
    """
    session = CompiledLayer.compile(rule_sets.session_permitted, rule_sets.session_blocked)
    persistent = CompiledLayer.compile(
        rule_sets.persistent_permitted, rule_sets.persistent_blocked
    )

    blocked: list[BlockedInvocation] = []
    for segment in split_shell_segments(command):
        invocation_tokens = normalize_invocation_tokens(tokenize_shell_words(segment))
        if not invocation_tokens:
            continue
        record = resolve_invocation(invocation_tokens, session, persistent)
        if record is not None:
            blocked.append(record)
    return blocked


def is_blocked_by_persistent_rules(prefix: str, rule_sets: RuleSets) -> bool:
    """Return ``True`` if the persistent layer alone blocks *prefix*.

    *prefix* must already be canonical.  Used to skip adding a block rule
    that an existing, shorter block rule already covers.
    """
    persistent = CompiledLayer.compile(
        rule_sets.persistent_permitted, rule_sets.persistent_blocked
    )
    decision = persistent.decide(tokenize_shell_words(prefix))
    return decision.action is LayerAction.BLOCK
