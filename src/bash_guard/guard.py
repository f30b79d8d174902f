"""bash-guard -- the host-facing orchestrator.

This module implements the :class:`BashGuard` class, the primary entry
point of the package.  It owns the four rule sets for one host session,
exposes the policy commands the host registers, and answers the host's
pre-execution hooks.

Hooks
-----

* :meth:`BashGuard.session_start` -- load persistent rules, reset session
  rules.
* :meth:`BashGuard.on_tool_call` -- veto an agent ``bash`` tool call.
* :meth:`BashGuard.on_user_bash` -- replace a user-typed command with a
  failed execution result.

Usage
-----
::

    from bash_guard import BashGuard, GuardConfig
    from bash_guard.core.interfaces import RecordingNotifier

    guard = BashGuard(RecordingNotifier(), config=GuardConfig())
    await guard.session_start()
    await guard.dispatch("bash-guard-permit", "kubectl get")

    decision = await guard.on_tool_call("bash", {"command": "kubectl get pods"})
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from bash_guard.core.config import GuardConfig
from bash_guard.core.errors import CommandBlocked, InvalidPrefix, StorageError, UnknownCommand
from bash_guard.core.interfaces import Notifier, RuleStore
from bash_guard.core.types import (
    BashExecutionResult,
    BlockedInvocation,
    NotifyLevel,
    ToolCallBlock,
    UserBashResult,
)
from bash_guard.policy.decision import find_blocked_invocations, is_blocked_by_persistent_rules
from bash_guard.policy.formatting import (
    blocked_reason,
    format_list,
    format_reset,
    format_status,
)
from bash_guard.policy.rules import canonicalize_prefix, require_canonical_prefix
from bash_guard.policy.state import RuleSets
from bash_guard.storage.json_store import JsonFileRuleStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Command surface
# ---------------------------------------------------------------------------

BLOCK_COMMAND = "bash-guard-block"
PERMIT_COMMAND = "bash-guard-permit"
BLOCK_PERSIST_COMMAND = "bash-guard-block-persist"
PERMIT_PERSIST_COMMAND = "bash-guard-permit-persist"
RESET_COMMAND = "bash-guard-reset"
STATUS_COMMAND = "bash-guard-status"

USAGE = (
    f"Commands: /{BLOCK_COMMAND} <prefix>, /{PERMIT_COMMAND} <prefix>, "
    f"/{BLOCK_PERSIST_COMMAND} <prefix>, /{PERMIT_PERSIST_COMMAND} <prefix>, "
    f"/{RESET_COMMAND}, /{STATUS_COMMAND}"
)

CommandHandler = Callable[[str | None], Awaitable[None]]


@dataclass(frozen=True, slots=True)
class GuardCommand:
    """A policy command as registered with the host."""

    name: str
    description: str
    handler: CommandHandler


def _canonical_set(prefixes: Iterable[str]) -> set[str]:
    return {canonical for prefix in prefixes if (canonical := canonicalize_prefix(prefix))}


class BashGuard:
    """Per-session command-prefix guard.

    Commands and hooks run under one :class:`asyncio.Lock`.  Persistent
    changes are made on a working copy that replaces the current rules
    only once the save has succeeded, so :meth:`evaluate` never sees an
    uncommitted rule, even while a save is suspended.

    Parameters
    ----------
    notifier:
        The host's message surface.
    config:
        Guard configuration.  Defaults to :class:`GuardConfig()`.
    store:
        Backend for the persistent rule sets.  Defaults to a
        :class:`JsonFileRuleStore` at ``config.config_path``.
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        config: GuardConfig | None = None,
        store: RuleStore | None = None,
    ) -> None:
        self._config = config or GuardConfig()
        self._notifier = notifier
        self._store: RuleStore = store or JsonFileRuleStore(
            self._config.config_path,
            default_blocked=self._config.default_blocked_prefixes,
        )
        self._rules = RuleSets()
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Properties for introspection
    # ------------------------------------------------------------------

    @property
    def config(self) -> GuardConfig:
        """The guard configuration."""
        return self._config

    @property
    def store(self) -> RuleStore:
        """The persistent rule store."""
        return self._store

    @property
    def rule_sets(self) -> RuleSets:
        """A copy of the current rule sets."""
        return self._rules.copy()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def session_start(self) -> None:
        """(Re)load persistent rules from storage and clear session rules.

        When storage held nothing yet, the defaults are written so the
        operator has a file to edit.
        """
        async with self._lock:
            loaded = await self._store.load()
            self._rules = RuleSets(
                persistent_blocked=_canonical_set(loaded.blocked_prefixes),
                persistent_permitted=_canonical_set(loaded.permitted_prefixes),
            )
            self._notifier.set_status(self._config.status_key, None)
            logger.debug(
                "Session started with %d persistent blocks, %d persistent permits",
                len(self._rules.persistent_blocked),
                len(self._rules.persistent_permitted),
            )

            if not loaded.existed:
                try:
                    await self._save_persistent(self._rules)
                except Exception as exc:
                    self._notify(
                        f"Failed to initialize guard config: {_error_text(exc)}",
                        NotifyLevel.ERROR,
                    )

            if loaded.error is not None:
                self._notify(
                    f"Failed reading {self._config.config_path}, using defaults "
                    f"(blocks: {format_list(self._rules.persistent_blocked)}, "
                    f"permits: {format_list(self._rules.persistent_permitted)}): "
                    f"{loaded.error}",
                    NotifyLevel.WARNING,
                )

    # ------------------------------------------------------------------
    # Session-only policy commands
    # ------------------------------------------------------------------

    async def block_session(self, args: str | None = None) -> None:
        """Block a prefix for the rest of this session."""
        async with self._lock:
            prefix = self._prefix_or_usage(args, BLOCK_COMMAND)
            if prefix is None:
                return
            self._rules.session_permitted.discard(prefix)
            self._rules.session_blocked.add(prefix)
            self._notify(f"Blocked for this session: {prefix}")

    async def permit_session(self, args: str | None = None) -> None:
        """Permit a prefix for the rest of this session."""
        async with self._lock:
            prefix = self._prefix_or_usage(args, PERMIT_COMMAND)
            if prefix is None:
                return
            self._rules.session_blocked.discard(prefix)
            self._rules.session_permitted.add(prefix)
            self._notify(f"Permitted for this session: {prefix}")

    async def reset_session(self, args: str | None = None) -> None:
        """Clear every session-only override."""
        async with self._lock:
            permits, blocks = self._rules.reset_session()
            self._notify(format_reset(permits, blocks))

    async def status(self, args: str | None = None) -> None:
        """Report all four rule sets and the resolution order."""
        async with self._lock:
            self._notify(format_status(self._rules))

    # ------------------------------------------------------------------
    # Persistent policy commands
    # ------------------------------------------------------------------

    async def block_persistent(self, args: str | None = None) -> None:
        """Block a prefix across sessions.

        A persistent permit for the same prefix is removed.  If the
        remaining persistent rules already block the prefix, no new block
        rule is added.
        """
        async with self._lock:
            prefix = self._prefix_or_usage(args, BLOCK_PERSIST_COMMAND)
            if prefix is None:
                return

            working = self._rules.copy()
            was_blocked = prefix in working.persistent_blocked
            removed_permit = prefix in working.persistent_permitted
            working.persistent_permitted.discard(prefix)

            covered = (
                removed_permit
                and not was_blocked
                and is_blocked_by_persistent_rules(prefix, working)
            )
            if not was_blocked and not covered:
                working.persistent_blocked.add(prefix)

            if not await self._commit(working):
                return

            if was_blocked and not removed_permit:
                self._notify(f"Already persistently blocked: {prefix}")
            elif covered:
                self._notify(
                    f"Removed persistent permit: {prefix}. Existing persistent "
                    "block prefixes already cover it, so no redundant block "
                    "rule was added."
                )
            elif removed_permit:
                self._notify(
                    f"Persistently blocked: {prefix} (removed persistent permit "
                    "for same prefix)."
                )
            else:
                self._notify(f"Persistently blocked: {prefix}")

    async def permit_persistent(self, args: str | None = None) -> None:
        """Permit a prefix across sessions, replacing any block for it."""
        async with self._lock:
            prefix = self._prefix_or_usage(args, PERMIT_PERSIST_COMMAND)
            if prefix is None:
                return

            working = self._rules.copy()
            was_permitted = prefix in working.persistent_permitted
            removed_block = prefix in working.persistent_blocked
            working.persistent_blocked.discard(prefix)
            working.persistent_permitted.add(prefix)

            if not await self._commit(working):
                return

            if was_permitted and not removed_block:
                self._notify(f"Already persistently permitted: {prefix}")
            elif removed_block:
                self._notify(
                    f"Persistently permitted: {prefix} (removed persistent block "
                    "for same prefix)."
                )
            else:
                self._notify(f"Persistently permitted: {prefix}")

    # ------------------------------------------------------------------
    # Command registration
    # ------------------------------------------------------------------

    def commands(self) -> dict[str, GuardCommand]:
        """Return the policy commands to register with the host, by name."""
        table = [
            GuardCommand(
                BLOCK_PERSIST_COMMAND,
                "Persistently block a bash command prefix",
                self.block_persistent,
            ),
            GuardCommand(
                PERMIT_PERSIST_COMMAND,
                "Persistently permit a bash command prefix",
                self.permit_persistent,
            ),
            GuardCommand(
                BLOCK_COMMAND,
                "Block a bash command prefix for the current session",
                self.block_session,
            ),
            GuardCommand(
                PERMIT_COMMAND,
                "Permit a bash command prefix for the current session",
                self.permit_session,
            ),
            GuardCommand(
                RESET_COMMAND,
                "Clear all session-only guard overrides",
                self.reset_session,
            ),
            GuardCommand(
                STATUS_COMMAND,
                "Show persistent and session guard prefixes",
                self.status,
            ),
        ]
        return {command.name: command for command in table}

    async def dispatch(self, name: str, args: str | None = None) -> None:
        """Run the policy command registered as *name*.

        Raises
        ------
        UnknownCommand
            If *name* is not one of :meth:`commands`.
        """
        command = self.commands().get(name.lstrip("/"))
        if command is None:
            raise UnknownCommand(
                f"Unknown bash-guard command: {name}",
                details={"command": name, "known": sorted(self.commands())},
            )
        await command.handler(args)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, command: str) -> list[BlockedInvocation]:
        """Return the blocked invocations in *command* (empty if allowed)."""
        return find_blocked_invocations(command, self._rules)

    def check_command(self, command: str) -> None:
        """Raise :class:`CommandBlocked` if any invocation in *command* is blocked."""
        blocked = self.evaluate(command)
        if blocked:
            raise CommandBlocked(
                blocked_reason(blocked),
                details={
                    "command": command,
                    "blocked": [entry.model_dump() for entry in blocked],
                },
            )

    async def on_tool_call(
        self,
        tool_name: str,
        tool_input: dict[str, Any],
    ) -> ToolCallBlock | None:
        """Pre-execution hook for agent tool calls.

        Only calls to the guarded tool with a non-empty string ``command``
        are evaluated.  Returns ``None`` to allow the call.
        """
        if tool_name != self._config.guarded_tool_name:
            return None
        command = tool_input.get("command")
        if not isinstance(command, str) or not command:
            return None

        async with self._lock:
            blocked = self.evaluate(command)
        if not blocked:
            return None

        logger.debug("Blocked tool call with %d blocked invocation(s)", len(blocked))
        return ToolCallBlock(reason=blocked_reason(blocked))

    async def on_user_bash(self, command: str) -> UserBashResult | None:
        """Pre-execution hook for commands the user runs directly.

        Returns ``None`` to allow the command, or a failed execution result
        carrying the block reason.
        """
        async with self._lock:
            blocked = self.evaluate(command)
        if not blocked:
            return None

        message = blocked_reason(blocked)
        self._notify(message, NotifyLevel.WARNING)
        return UserBashResult(
            result=BashExecutionResult(
                output=message,
                exit_code=self._config.blocked_exit_code,
                cancelled=False,
                truncated=False,
            )
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _notify(self, message: str, level: NotifyLevel = NotifyLevel.INFO) -> None:
        self._notifier.notify(message, level)

    def _prefix_or_usage(self, args: str | None, command_name: str) -> str | None:
        """Canonicalize *args*, or show usage and return ``None``."""
        try:
            return require_canonical_prefix(args or "")
        except InvalidPrefix:
            self._notify(f"Usage: /{command_name} <prefix>", NotifyLevel.WARNING)
            self._notify(USAGE)
            return None

    async def _save_persistent(self, rules: RuleSets) -> None:
        await self._store.save(rules.persistent_blocked, rules.persistent_permitted)

    async def _commit(self, working: RuleSets) -> bool:
        """Save *working* and make it current; on failure keep the current rules.

        Evaluation never sees *working* until the save has succeeded.
        """
        try:
            await self._save_persistent(working)
        except Exception as exc:
            logger.warning(
                "Discarded guard rule change after failed save: %s",
                exc,
                exc_info=not isinstance(exc, (StorageError, OSError)),
            )
            self._notify(
                f"Failed to persist guard config: {_error_text(exc)}",
                NotifyLevel.ERROR,
            )
            return False
        self._rules = working
        return True


def _error_text(exc: Exception) -> str:
    if isinstance(exc, StorageError):
        return exc.message
    if isinstance(exc, OSError):
        return str(exc)
    return f"{type(exc).__name__}: {exc}"
