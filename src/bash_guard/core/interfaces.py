"""bash-guard host capability interfaces and in-memory implementations.

This module defines the *structural* interfaces (``typing.Protocol``) the
guard calls into for storage and user notification, plus lightweight
in-memory implementations suitable for testing and local development.

Every Protocol class is decorated with ``@runtime_checkable`` so that
``isinstance`` checks work at run-time in addition to static analysis.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from bash_guard.core.config import DEFAULT_BLOCKED_PREFIXES
from bash_guard.core.errors import StorageWriteFailure
from bash_guard.core.types import LoadedRules, NotifyLevel

# ===================================================================
# Protocol (interface) definitions
# ===================================================================

@runtime_checkable
class RuleStore(Protocol):
    """Backend for the persistent rule sets."""

    async def load(self) -> LoadedRules:
        """Load the stored rule sets.

        MUST NOT raise for a missing or malformed store: fall back to the
        defaults and report the problem through ``LoadedRules.error``.
        """
        ...

    async def save(self, blocked: Iterable[str], permitted: Iterable[str]) -> None:
        """Persist both rule sets as one unit.

        Raises :class:`StorageWriteFailure` if nothing could be written.
        """
        ...


@runtime_checkable
class Notifier(Protocol):
    """The host's user-facing message surface."""

    def notify(self, message: str, level: NotifyLevel) -> None:
        """Show *message* to the operator at *level*."""
        ...

    def set_status(self, key: str, text: str | None) -> None:
        """Set or clear (``text=None``) the status-bar entry *key*."""
        ...


# ===================================================================
# In-memory implementations (testing / development)
# ===================================================================

class InMemoryRuleStore:
    """In-memory rule store for testing and development.

    Starts empty (as if no file existed) unless seeded.  Set
    ``fail_writes`` to make every :meth:`save` raise.
    """

    def __init__(
        self,
        blocked: Iterable[str] | None = None,
        permitted: Iterable[str] | None = None,
        *,
        default_blocked: Iterable[str] = DEFAULT_BLOCKED_PREFIXES,
    ) -> None:
        self._default_blocked = list(default_blocked)
        self._blocked: list[str] | None = None if blocked is None else list(blocked)
        self._permitted: list[str] | None = None if permitted is None else list(permitted)
        self.fail_writes = False
        self.save_count = 0

    @property
    def blocked(self) -> list[str] | None:
        """Stored block prefixes (``None`` if nothing was ever saved)."""
        return None if self._blocked is None else list(self._blocked)

    @property
    def permitted(self) -> list[str] | None:
        """Stored permit prefixes (``None`` if nothing was ever saved)."""
        return None if self._permitted is None else list(self._permitted)

    async def load(self) -> LoadedRules:
        """Return the stored rule sets, or the defaults when unseeded."""
        if self._blocked is None and self._permitted is None:
            return LoadedRules(blocked_prefixes=list(self._default_blocked), existed=False)
        return LoadedRules(
            blocked_prefixes=list(self._blocked or []),
            permitted_prefixes=list(self._permitted or []),
        )

    async def save(self, blocked: Iterable[str], permitted: Iterable[str]) -> None:
        """Store sorted copies of both sets."""
        if self.fail_writes:
            raise StorageWriteFailure(
                "In-memory store is configured to fail writes",
                details={"store": "memory"},
            )
        self._blocked = sorted(blocked)
        self._permitted = sorted(permitted)
        self.save_count += 1


@dataclass(frozen=True, slots=True)
class Notification:
    """One message captured by :class:`RecordingNotifier`."""

    message: str
    level: NotifyLevel


class RecordingNotifier:
    """Notifier that records every message and status update."""

    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self.status: dict[str, str | None] = {}

    def notify(self, message: str, level: NotifyLevel) -> None:
        """Record *message* at *level*."""
        self.notifications.append(Notification(message=message, level=NotifyLevel(level)))

    def set_status(self, key: str, text: str | None) -> None:
        """Record the latest status text for *key*."""
        self.status[key] = text

    @property
    def last(self) -> Notification | None:
        """The most recent notification, or ``None``."""
        return self.notifications[-1] if self.notifications else None

    def messages(self, level: NotifyLevel | None = None) -> list[str]:
        """Return recorded messages, optionally filtered by *level*."""
        return [n.message for n in self.notifications if level is None or n.level == level]

    def clear(self) -> None:
        self.notifications.clear()
