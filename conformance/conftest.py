"""Shared fixtures for bash-guard conformance tests.

Provides rule sets, stores and guards reused across the levels.
"""
from __future__ import annotations

import pytest

from bash_guard.core.interfaces import InMemoryRuleStore, RecordingNotifier
from bash_guard.guard import BashGuard
from bash_guard.policy.state import RuleSets

# ---------------------------------------------------------------------------
# Common commands used across tests
# ---------------------------------------------------------------------------
GCLOUD_LIST = "gcloud compute instances list; echo hi"
GCLOUD_REASON = (
    "Blocked bash invocation(s): gcloud compute instances list (matched: gcloud). "
    "Use /bash-guard-permit <prefix> to allow in this session."
)


# ---------------------------------------------------------------------------
# Rule-set fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def default_rules() -> RuleSets:
    return RuleSets(persistent_blocked={"gcloud", "kubectl"})


@pytest.fixture()
def layered_rules() -> RuleSets:
    """Persistent ``kubectl`` block carved out by a ``kubectl get`` permit."""
    return RuleSets(
        persistent_blocked={"kubectl"},
        persistent_permitted={"kubectl get"},
    )


# ---------------------------------------------------------------------------
# Guard fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def rule_store() -> InMemoryRuleStore:
    return InMemoryRuleStore()


@pytest.fixture()
def guard(notifier: RecordingNotifier, rule_store: InMemoryRuleStore) -> BashGuard:
    return BashGuard(notifier, store=rule_store)
