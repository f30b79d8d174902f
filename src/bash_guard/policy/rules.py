"""Prefix rule compilation and matching.

A rule is compiled from whatever the operator typed, e.g.
``sudo /usr/bin/kubectl delete``, by running it through the same
tokenizer and normalizer as a live command.  The result is a canonical
prefix (``kubectl delete``) whose tokens are compared position by
position against invocation tokens.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from bash_guard.core.errors import InvalidPrefix
from bash_guard.parsing.normalizer import normalize_invocation_tokens
from bash_guard.parsing.tokenizer import tokenize_shell_words


@dataclass(frozen=True, slots=True)
class PrefixRule:
    """A compiled command-prefix rule.

    Attributes
    ----------
    prefix:
        The canonical prefix string (tokens joined by single spaces).
    tokens:
        The tokens compared against an invocation.
    token_count:
        ``len(tokens)``; the rule's specificity.
    """

    prefix: str
    tokens: tuple[str, ...]
    token_count: int


def canonicalize_prefix(raw: str) -> str | None:
    """Return the canonical form of *raw*, or ``None`` if it names no command."""
    normalized = normalize_invocation_tokens(tokenize_shell_words(raw.strip()))
    if not normalized:
        return None
    return " ".join(normalized)


def require_canonical_prefix(raw: str) -> str:
    """Like :func:`canonicalize_prefix` but raise :class:`InvalidPrefix`."""
    canonical = canonicalize_prefix(raw)
    if canonical is None:
        raise InvalidPrefix(
            f"Prefix names no effective command: {raw!r}",
            details={"prefix": raw},
        )
    return canonical


def compile_rule(raw: str) -> PrefixRule | None:
    """Compile *raw* into a :class:`PrefixRule`, or ``None`` if invalid."""
    canonical = canonicalize_prefix(raw)
    if canonical is None:
        return None
    tokens = tuple(tokenize_shell_words(canonical))
    return PrefixRule(prefix=canonical, tokens=tokens, token_count=len(tokens))


def build_rules(prefixes: Iterable[str]) -> list[PrefixRule]:
    """Compile every prefix in *prefixes*, silently dropping invalid ones."""
    rules: list[PrefixRule] = []
    for prefix in prefixes:
        rule = compile_rule(prefix)
        if rule is not None:
            rules.append(rule)
    return rules


def is_prefix_match(
    invocation_tokens: list[str] | tuple[str, ...],
    rule_tokens: list[str] | tuple[str, ...],
) -> bool:
    """Return ``True`` if *rule_tokens* is a positional prefix of the invocation."""
    if not rule_tokens or len(rule_tokens) > len(invocation_tokens):
        return False
    return all(
        invocation_tokens[i] == token for i, token in enumerate(rule_tokens)
    )


def matching_rules(
    invocation_tokens: list[str] | tuple[str, ...],
    rules: Iterable[PrefixRule],
) -> list[PrefixRule]:
    """Return the rules in *rules* that match *invocation_tokens*."""
    return [rule for rule in rules if is_prefix_match(invocation_tokens, rule.tokens)]
