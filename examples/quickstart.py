#!/usr/bin/env python3
"""bash-guard quickstart -- Hello World example.

Demonstrates the core workflow of bash-guard:

1. Create a guard backed by a JSON file in a temporary directory.
2. Start a session (writes the default block list).
3. Check an agent tool call against the defaults.
4. Permit a prefix for this session and re-check.
5. Persistently block a prefix.
6. Show the active rules.

Run:
    python examples/quickstart.py
"""
from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from bash_guard import BashGuard, GuardConfig, NotifyLevel


class PrintNotifier:
    """Notifier that prints every message to stdout."""

    def notify(self, message: str, level: NotifyLevel) -> None:
        print(f"    [{level}] {message}")

    def set_status(self, key: str, text: str | None) -> None:
        pass


async def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        # -- Step 1: Create the guard -----------------------------------------
        config_path = Path(tmp) / "bash-guard.json"
        guard = BashGuard(PrintNotifier(), config=GuardConfig(config_path=config_path))
        print(f"[1] Guard created: {config_path}")

        # -- Step 2: Start a session ------------------------------------------
        await guard.session_start()
        print(f"[2] Session started, defaults written:\n{config_path.read_text()}")

        # -- Step 3: Check a tool call ----------------------------------------
        command = "sudo -u root kubectl get pods | grep web"
        veto = await guard.on_tool_call("bash", {"command": command})
        print(f"[3] {command!r} -> {veto.reason if veto else 'allowed'}")

        # -- Step 4: Permit for this session ----------------------------------
        await guard.dispatch("bash-guard-permit", "kubectl get")
        veto = await guard.on_tool_call("bash", {"command": command})
        print(f"[4] {command!r} -> {veto.reason if veto else 'allowed'}")

        # -- Step 5: Persistently block ---------------------------------------
        await guard.dispatch("bash-guard-block-persist", "terraform destroy")
        result = await guard.on_user_bash("terraform destroy -auto-approve")
        if result is not None:
            print(f"[5] user command exit_code: {result.result.exit_code}")

        # -- Step 6: Show the rules -------------------------------------------
        print("[6] Status:")
        await guard.dispatch("bash-guard-status")


if __name__ == "__main__":
    asyncio.run(main())
