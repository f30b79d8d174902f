"""Shell word tokenization.

Splits one shell segment into words with enough fidelity to find command
names and argument boundaries:

* Single quotes preserve everything literally, backslashes included.
* Double quotes group words; a backslash still escapes the next character.
* Outside quotes a backslash escapes the next character, whitespace too.
* Quote characters are removed, and adjacent quoted and unquoted fragments
  join into one word (``a"b c"d`` -> ``ab cd``).

Variables, globs and substitutions are left as plain text.
"""
from __future__ import annotations

_QUOTES = frozenset("'\"")


def tokenize_shell_words(segment: str) -> list[str]:
    """Return the words of *segment* with quoting removed.

    Examples
    --------
    >>> tokenize_shell_words('a "b c" d')
    ['a', 'b c', 'd']
    >>> tokenize_shell_words("a\\\\ b")
    ['a b']
    """
    tokens: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False

    for ch in segment:
        if escaped:
            current.append(ch)
            escaped = False
            continue

        if ch == "\\" and quote != "'":
            escaped = True
            continue

        if quote is not None:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
            continue

        if ch in _QUOTES:
            quote = ch
            continue

        if ch.isspace():
            if current:
                tokens.append("".join(current))
                current.clear()
            continue

        current.append(ch)

    if current:
        tokens.append("".join(current))
    return tokens
