# =============================================================================
# core/preferences.py  -  User Preference Storage & Retrieval
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Keeps the user's saved defaults (brew method, coffee type, package size,
#   email, shipping address) in a single JSON file under the per-user config
#   directory (~/.doppio-coffee/preferences.json by default).
#
# DEGRADATION:
#   If the file cannot be read or written, the store falls back to a value
#   held in memory for the lifetime of the store.  Callers never see an I/O
#   error from this module.
#
# CONCURRENCY:
#   save() is read, merge, write with no locking.  Two saves racing each
#   other lose one update (last writer wins).
# =============================================================================

import json
import logging
from pathlib import Path
from typing import Optional, Union

from core.config import preferences_path
from core.models import UserPreferences

logger = logging.getLogger(__name__)


class PreferenceStore:
    """File-backed store for the single UserPreferences record."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self._path = Path(path) if path is not None else preferences_path()
        self._memory = UserPreferences()

    @property
    def path(self) -> Path:
        """Location of the preferences file, for display to the user."""
        return self._path

    def get(self) -> UserPreferences:
        """Return the saved preferences, or the in-memory fallback."""
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return UserPreferences.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.debug("Using in-memory preferences (%s): %s", self._path, exc)
            return self._memory

    def save(self, partial: UserPreferences) -> UserPreferences:
        """Merge `partial` onto the current record and persist the result.

        Fields set on `partial` replace the stored values; fields left as
        None are kept.  The merged record is returned even when it could
        only be kept in memory.
        """
        updated = self.get().merged_with(partial)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(updated.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            logger.debug("Could not write %s, keeping preferences in memory: %s", self._path, exc)
            self._memory = updated
        return updated

    def clear(self) -> None:
        """Forget every saved default."""
        self._memory = UserPreferences()
        try:
            self._path.write_text("{}", encoding="utf-8")
        except OSError as exc:
            logger.debug("Could not clear %s: %s", self._path, exc)
