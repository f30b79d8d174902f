"""Persistent rule storage for bash-guard.

* **JsonFileRuleStore** -- rule sets as a JSON document on disk,
  implementing the :class:`~bash_guard.core.interfaces.RuleStore`
  protocol.
"""
from __future__ import annotations

from bash_guard.storage.json_store import JsonFileRuleStore

__all__ = ["JsonFileRuleStore"]
