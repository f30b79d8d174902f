"""JSON file backend for the persistent rule sets.

File layout::

    {
      "blockedPrefixes": ["gcloud", "kubectl"],
      "permittedPrefixes": []
    }

Loading rules:

* Missing file -> built-in default blocks, no permits, ``existed=False``.
* A field that is missing or not an array counts as absent.  With
  ``blockedPrefixes`` absent, blocks default to the built-in list unless
  ``permittedPrefixes`` is present, in which case no blocks are loaded.
* Unreadable file, invalid JSON or non-string entries -> defaults, with
  the raw error text in ``LoadedRules.error``.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from bash_guard.core.config import DEFAULT_BLOCKED_PREFIXES
from bash_guard.core.errors import StorageReadFailure, StorageWriteFailure
from bash_guard.core.types import LoadedRules, PersistedGuardConfig

logger = logging.getLogger(__name__)


class JsonFileRuleStore:
    """Persist rule sets as pretty-printed JSON at *path*.

    Parameters
    ----------
    path:
        Location of the JSON file.  Parent directories are created on
        the first save.
    default_blocked:
        Block prefixes used when the file is missing or unusable.
    """

    def __init__(
        self,
        path: Path,
        *,
        default_blocked: Iterable[str] = DEFAULT_BLOCKED_PREFIXES,
    ) -> None:
        self._path = path
        self._default_blocked = list(default_blocked)

    @property
    def path(self) -> Path:
        """The JSON file backing this store."""
        return self._path

    async def load(self) -> LoadedRules:
        """Read the rule sets from disk, falling back to the defaults."""
        if not self._path.exists():
            logger.debug("No guard config at %s; using defaults", self._path)
            return LoadedRules(blocked_prefixes=list(self._default_blocked), existed=False)

        try:
            parsed = self._read_document()
        except StorageReadFailure as exc:
            logger.warning("Failed reading guard config %s: %s", self._path, exc.message)
            return LoadedRules(
                blocked_prefixes=list(self._default_blocked),
                existed=True,
                error=exc.message,
            )

        if parsed.blocked_prefixes is not None:
            blocked = list(parsed.blocked_prefixes)
        elif parsed.permitted_prefixes is not None:
            blocked = []
        else:
            blocked = list(self._default_blocked)

        return LoadedRules(
            blocked_prefixes=blocked,
            permitted_prefixes=list(parsed.permitted_prefixes or []),
            existed=True,
        )

    async def save(self, blocked: Iterable[str], permitted: Iterable[str]) -> None:
        """Write both rule sets, sorted, replacing the file's contents.

        Raises
        ------
        StorageWriteFailure
            If the directory or file could not be written.
        """
        payload = PersistedGuardConfig(
            blocked_prefixes=sorted(blocked),
            permitted_prefixes=sorted(permitted),
        ).model_dump(by_alias=True)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StorageWriteFailure(
                str(exc),
                details={"path": str(self._path)},
            ) from exc

        logger.debug(
            "Saved guard config to %s (%d blocks, %d permits)",
            self._path,
            len(payload["blockedPrefixes"]),
            len(payload["permittedPrefixes"]),
        )

    def _read_document(self) -> PersistedGuardConfig:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            # Anything other than an object carries no rule fields.
            return PersistedGuardConfig.model_validate(data if isinstance(data, dict) else {})
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            raise StorageReadFailure(
                str(exc),
                details={"path": str(self._path)},
            ) from exc
