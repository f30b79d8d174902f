"""Shell segment splitting.

Splits a raw command string into the independently evaluated pieces that
a shell would run: anything separated by an unquoted, unescaped ``;``,
``|``, ``&`` or newline.  ``&&`` and ``||`` fall out naturally because
empty segments between doubled delimiters are dropped.

Quote and escape characters are kept verbatim in the emitted segments;
the tokenizer strips them later.
"""
from __future__ import annotations

SEGMENT_DELIMITERS = frozenset(";|&\n")
"""Characters that end a segment outside quotes."""

_QUOTES = frozenset("'\"")


def split_shell_segments(command: str) -> list[str]:
    """Split *command* into trimmed, non-empty shell segments.

    Examples
    --------
    >>> split_shell_segments("a; b | c")
    ['a', 'b', 'c']
    >>> split_shell_segments('echo "a;b"')
    ['echo "a;b"']
    """
    segments: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False

    def _flush() -> None:
        text = "".join(current).strip()
        if text:
            segments.append(text)
        current.clear()

    for ch in command:
        if escaped:
            current.append(ch)
            escaped = False
            continue

        if ch == "\\":
            current.append(ch)
            escaped = True
            continue

        if quote is not None:
            current.append(ch)
            if ch == quote:
                quote = None
            continue

        if ch in _QUOTES:
            quote = ch
            current.append(ch)
            continue

        if ch in SEGMENT_DELIMITERS:
            _flush()
            continue

        current.append(ch)

    _flush()
    return segments
