"""Session-scoped rule-set state.

All four rule sets live on one :class:`RuleSets` object that is passed
explicitly into evaluation, so decisions are a pure function of the
command and this object.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RuleSets:
    """The four canonical-prefix sets consulted for every decision.

    Invariant: within one layer a prefix is never both blocked and
    permitted.  Mutators must discard it from the opposite set first.
    """

    session_blocked: set[str] = field(default_factory=set)
    session_permitted: set[str] = field(default_factory=set)
    persistent_blocked: set[str] = field(default_factory=set)
    persistent_permitted: set[str] = field(default_factory=set)

    def copy(self) -> RuleSets:
        """Return an independent copy of all four sets."""
        return RuleSets(
            session_blocked=set(self.session_blocked),
            session_permitted=set(self.session_permitted),
            persistent_blocked=set(self.persistent_blocked),
            persistent_permitted=set(self.persistent_permitted),
        )

    def reset_session(self) -> tuple[int, int]:
        """Clear both session sets; return ``(permits, blocks)`` cleared."""
        cleared = (len(self.session_permitted), len(self.session_blocked))
        self.session_permitted.clear()
        self.session_blocked.clear()
        return cleared
