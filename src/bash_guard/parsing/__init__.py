"""Shell parsing for bash-guard.

This subpackage turns raw command strings into comparable invocations:

* **split_shell_segments** -- splits a command on unquoted ``;``, ``|``,
  ``&`` and newlines.
* **tokenize_shell_words** -- splits one segment into words, honoring
  quotes and backslash escapes.
* **normalize_invocation_tokens** -- strips environment assignments and
  wrapper commands to expose the effective program.
* **WrapperSpec** / **WRAPPERS** -- the wrapper lookup table.
"""
from __future__ import annotations

from bash_guard.parsing.normalizer import (
    SUDO_OPTIONS_WITH_VALUE,
    WRAPPERS,
    WrapperSpec,
    is_env_assignment,
    normalize_command_name,
    normalize_invocation_tokens,
    parse_invocation,
)
from bash_guard.parsing.segmenter import SEGMENT_DELIMITERS, split_shell_segments
from bash_guard.parsing.tokenizer import tokenize_shell_words

__all__ = [
    "SEGMENT_DELIMITERS",
    "SUDO_OPTIONS_WITH_VALUE",
    "WRAPPERS",
    "WrapperSpec",
    "is_env_assignment",
    "normalize_command_name",
    "normalize_invocation_tokens",
    "parse_invocation",
    "split_shell_segments",
    "tokenize_shell_words",
]
