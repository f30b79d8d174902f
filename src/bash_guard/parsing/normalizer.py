"""Invocation normalization.

Turns the words of a shell segment into the *effective* invocation: the
program that actually runs plus its arguments.  Leading environment
assignments are dropped and known wrapper commands (``env``, ``sudo``,
``command``, ``nohup``, ``time``) are peeled off together with their own
options, repeatedly, so ``sudo env FOO=1 kubectl get pods`` normalizes to
``["kubectl", "get", "pods"]``.

Wrappers are described as data in :data:`WRAPPERS`.  Supporting a new
wrapper means adding a :class:`WrapperSpec` entry.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from bash_guard.parsing.tokenizer import tokenize_shell_words

# ---------------------------------------------------------------------------
# Token shapes
# ---------------------------------------------------------------------------

_ENV_ASSIGNMENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*=")
_EDGE_QUOTES_RE = re.compile(r"^['\"]+|['\"]+$")
_LEADING_PARENS_RE = re.compile(r"^[()]+")
_TRAILING_PARENS_RE = re.compile(r"[()]+$")
_EXE_SUFFIX_RE = re.compile(r"\.exe$", re.IGNORECASE)


def is_env_assignment(token: str) -> bool:
    """Return ``True`` if *token* looks like ``NAME=value``."""
    return _ENV_ASSIGNMENT_RE.match(token) is not None


def normalize_command_name(raw: str) -> str:
    """Reduce a command word to a comparable program name.

    Strips surrounding quotes and parentheses, directory components and a
    ``.exe`` suffix, then lowercases: ``"/usr/bin/Kubectl.EXE"`` becomes
    ``"kubectl"``.
    """
    trimmed = _EDGE_QUOTES_RE.sub("", raw.strip())
    no_parens = _TRAILING_PARENS_RE.sub("", _LEADING_PARENS_RE.sub("", trimmed))
    parts = [part for part in no_parens.split("/") if part]
    base = parts[-1] if parts else no_parens
    return _EXE_SUFFIX_RE.sub("", base).lower()


# ---------------------------------------------------------------------------
# Wrapper table
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class WrapperSpec:
    """How to step over one wrapper command and its options.

    Attributes
    ----------
    options_with_value:
        Options that consume the following token as their value.
    skips_assignments:
        Whether ``NAME=value`` tokens may be interleaved with options
        (as ``env`` allows).
    normalize_options:
        Compare options after :func:`normalize_command_name`, which makes
        the comparison case-insensitive.
    """

    options_with_value: frozenset[str] = field(default_factory=frozenset)
    skips_assignments: bool = False
    normalize_options: bool = False

    def skip(self, tokens: list[str], idx: int) -> int:
        """Return the index just past the wrapper at *idx* and its options."""
        idx += 1
        while idx < len(tokens):
            token = tokens[idx]
            if self.skips_assignments and is_env_assignment(token):
                idx += 1
                continue
            if not token.startswith("-"):
                break
            option = normalize_command_name(token) if self.normalize_options else token
            idx += 1
            if option in self.options_with_value and idx < len(tokens):
                idx += 1
        return idx


SUDO_OPTIONS_WITH_VALUE = frozenset({
    "-u", "--user",
    "-g", "--group",
    "-h", "--host",
    "-p", "--prompt",
    "-r", "--role",
    "-t", "--type",
    "-c", "--close-from",
})

_PLAIN_WRAPPER = WrapperSpec()

WRAPPERS: dict[str, WrapperSpec] = {
    "env": WrapperSpec(
        options_with_value=frozenset({"-u", "--unset"}),
        skips_assignments=True,
    ),
    "sudo": WrapperSpec(
        options_with_value=SUDO_OPTIONS_WITH_VALUE,
        normalize_options=True,
    ),
    "command": _PLAIN_WRAPPER,
    "nohup": _PLAIN_WRAPPER,
    "time": _PLAIN_WRAPPER,
}
"""Wrapper commands, keyed by normalized command name."""


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_invocation_tokens(
    tokens: list[str],
    wrappers: dict[str, WrapperSpec] | None = None,
) -> list[str]:
    """Return the effective invocation hidden in *tokens*.

    The first element of the result is the normalized command name; the
    remaining arguments are returned unchanged.  An empty list means the
    tokens hold no command at all (only assignments and wrappers).
    """
    table = WRAPPERS if wrappers is None else wrappers
    idx = 0

    while idx < len(tokens):
        while idx < len(tokens) and is_env_assignment(tokens[idx]):
            idx += 1
        if idx >= len(tokens):
            return []

        name = normalize_command_name(tokens[idx])
        spec = table.get(name)
        if spec is not None:
            idx = spec.skip(tokens, idx)
            continue

        normalized = tokens[idx:]
        normalized[0] = name
        return normalized

    return []


def parse_invocation(segment: str) -> list[str]:
    """Tokenize one shell segment and normalize it into an invocation."""
    return normalize_invocation_tokens(tokenize_shell_words(segment))
