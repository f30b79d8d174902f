"""bash-guard -- command-prefix policy guard for agent shell execution.

Decides whether a shell command about to be run by an automated agent
should be blocked, using block and permit prefix rules held at two
lifetimes (session-only and persistent).

Layers
------
1. Parsing (:mod:`bash_guard.parsing`) -- segments, words, wrappers.
2. Policy (:mod:`bash_guard.policy`) -- rule compilation and decisions.
3. Storage (:mod:`bash_guard.storage`) -- persistent rule sets on disk.
4. Host integration (:mod:`bash_guard.guard`) -- commands and hooks.
"""
from __future__ import annotations

__version__ = "1.0.0a1"

from bash_guard.core.config import GuardConfig
from bash_guard.core.errors import (
    BashGuardError,
    CommandBlocked,
    InvalidPrefix,
    PolicyError,
    RuleError,
    StorageError,
    StorageReadFailure,
    StorageWriteFailure,
    UnknownCommand,
)
from bash_guard.core.interfaces import (
    InMemoryRuleStore,
    Notifier,
    RecordingNotifier,
    RuleStore,
)
from bash_guard.core.types import (
    BashExecutionResult,
    BlockedInvocation,
    LayerAction,
    LoadedRules,
    NotifyLevel,
    PersistedGuardConfig,
    ToolCallBlock,
    UserBashResult,
)
from bash_guard.guard import BashGuard, GuardCommand
from bash_guard.parsing import (
    normalize_invocation_tokens,
    split_shell_segments,
    tokenize_shell_words,
)
from bash_guard.policy import (
    PrefixRule,
    RuleSets,
    canonicalize_prefix,
    compile_rule,
    decide_layer,
    find_blocked_invocations,
    is_prefix_match,
)
from bash_guard.storage import JsonFileRuleStore

__all__ = [
    "BashExecutionResult",
    "BashGuard",
    "BashGuardError",
    "BlockedInvocation",
    "CommandBlocked",
    "GuardCommand",
    "GuardConfig",
    "InMemoryRuleStore",
    "InvalidPrefix",
    "JsonFileRuleStore",
    "LayerAction",
    "LoadedRules",
    "Notifier",
    "NotifyLevel",
    "PersistedGuardConfig",
    "PolicyError",
    "PrefixRule",
    "RecordingNotifier",
    "RuleError",
    "RuleSets",
    "RuleStore",
    "StorageError",
    "StorageReadFailure",
    "StorageWriteFailure",
    "ToolCallBlock",
    "UnknownCommand",
    "UserBashResult",
    "__version__",
    "canonicalize_prefix",
    "compile_rule",
    "decide_layer",
    "find_blocked_invocations",
    "is_prefix_match",
    "normalize_invocation_tokens",
    "split_shell_segments",
    "tokenize_shell_words",
]
