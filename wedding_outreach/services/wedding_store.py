"""Wedding Store - Persistence for weddings and outreach records.

Records are kept in memory and, when a path is given, written through to a
single JSON file:

    {
        "weddings": {"<id>": {...}},
        "outreach": {"<id>": {...}}
    }

DATA_DIR is configured from the environment:
  - Production: a persistent disk mount
  - Local development: ./data
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from threading import Lock

from wedding_outreach.models import VendorOutreach, Wedding
from wedding_outreach.models.wedding import utc_now

logger = logging.getLogger(__name__)


class WeddingStoreError(Exception):
    """Raised when the store file cannot be read or written."""
    pass


def new_id() -> str:
    return uuid.uuid4().hex


class WeddingStore:
    """Thread-safe wedding/outreach store with optional JSON persistence."""

    def __init__(self, path: Path | None = None):
        self.path = Path(path) if path else None
        self._lock = Lock()
        self._weddings: dict[str, Wedding] = {}
        self._outreach: dict[str, VendorOutreach] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        """Load the JSON file on first access (caller holds the lock)."""
        if self._loaded:
            return
        self._loaded = True
        if not self.path or not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            self._weddings = {k: Wedding.from_dict(v) for k, v in data.get("weddings", {}).items()}
            self._outreach = {k: VendorOutreach.from_dict(v) for k, v in data.get("outreach", {}).items()}
        except (OSError, ValueError, KeyError) as e:
            raise WeddingStoreError(f"Failed to load store {self.path}: {e}") from e
        logger.info(
            "[store] loaded weddings=%d outreach=%d from %s",
            len(self._weddings), len(self._outreach), self.path,
        )

    def _flush(self) -> None:
        """Write everything back to disk (caller holds the lock)."""
        if not self.path:
            return
        data = {
            "weddings": {k: w.to_dict() for k, w in self._weddings.items()},
            "outreach": {k: o.to_dict() for k, o in self._outreach.items()},
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(".tmp")
            tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise WeddingStoreError(f"Failed to write store {self.path}: {e}") from e

    # ------------------------------------------------------------------
    # Weddings
    # ------------------------------------------------------------------

    def save_wedding(self, wedding: Wedding) -> Wedding:
        with self._lock:
            self._ensure_loaded()
            wedding.updated_at = utc_now()
            self._weddings[wedding.id] = wedding
            self._flush()
        return wedding

    def get_wedding(self, wedding_id: str) -> Wedding | None:
        with self._lock:
            self._ensure_loaded()
            return self._weddings.get(wedding_id)

    def get_latest_wedding(self, user_id: str) -> Wedding | None:
        """Most recently created wedding for a user."""
        with self._lock:
            self._ensure_loaded()
            owned = [w for w in self._weddings.values() if w.user_id == user_id]
        if not owned:
            return None
        return max(owned, key=lambda w: w.created_at)

    # ------------------------------------------------------------------
    # Outreach
    # ------------------------------------------------------------------

    def create_outreach(self, outreach: VendorOutreach) -> VendorOutreach:
        return self.save_outreach(outreach)

    def save_outreach(self, outreach: VendorOutreach) -> VendorOutreach:
        with self._lock:
            self._ensure_loaded()
            self._outreach[outreach.id] = outreach
            self._flush()
        return outreach

    def get_outreach(self, outreach_id: str) -> VendorOutreach | None:
        with self._lock:
            self._ensure_loaded()
            return self._outreach.get(outreach_id)

    def list_outreach(self, wedding_id: str) -> list[VendorOutreach]:
        """Outreach records for a wedding, newest first."""
        with self._lock:
            self._ensure_loaded()
            records = [o for o in self._outreach.values() if o.wedding_id == wedding_id]
        return sorted(records, key=lambda o: o.created_at, reverse=True)
