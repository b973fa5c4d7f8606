"""Vendor Repository - Read access to the vendor store.

This module handles:
- Candidate loading for a requested location
- Vendor lookup by id for outreach

Interface Contract:
- find_by_location(location) -> list[Vendor], ordered by vendor id
- get(vendor_id) -> Vendor | None
- get_many(vendor_ids) -> list[Vendor]
- Store failures raise VendorRepositoryError

A vendor matches a location when its ``location``, ``region`` or ``suburb``
contains the query as a case-insensitive substring. An empty query matches
every vendor; callers validate the location before it gets here.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Iterable

from wedding_outreach.models import Vendor

logger = logging.getLogger(__name__)

LOCATION_FIELDS = ("location", "region", "suburb")


class VendorRepositoryError(Exception):
    """Raised when the vendor store cannot be read."""
    pass


def matches_location(vendor: Vendor, location: str) -> bool:
    """True if any of the vendor's location fields contains ``location``."""
    needle = location.lower()
    for field_name in LOCATION_FIELDS:
        value = getattr(vendor, field_name)
        if value and needle in value.lower():
            return True
    return False


class VendorRepository(ABC):
    """Abstract vendor store."""

    @abstractmethod
    def find_by_location(self, location: str) -> list[Vendor]:
        """Return every vendor whose location, region or suburb contains ``location``."""
        pass

    @abstractmethod
    def get_many(self, vendor_ids: Iterable[str]) -> list[Vendor]:
        """Return the vendors with the given ids (unknown ids are skipped)."""
        pass

    def get(self, vendor_id: str) -> Vendor | None:
        vendors = self.get_many([vendor_id])
        return vendors[0] if vendors else None


class InMemoryVendorRepository(VendorRepository):
    """Vendor store backed by a list held in memory."""

    def __init__(self, vendors: Iterable[Vendor] = ()):
        self._vendors = sorted(vendors, key=lambda v: v.id)

    def _all(self) -> list[Vendor]:
        return self._vendors

    def all_vendors(self) -> list[Vendor]:
        """Every vendor in the store, including ones with no location fields."""
        return list(self._all())

    def find_by_location(self, location: str) -> list[Vendor]:
        return [v for v in self._all() if matches_location(v, location)]

    def get_many(self, vendor_ids: Iterable[str]) -> list[Vendor]:
        wanted = set(vendor_ids)
        return [v for v in self._all() if v.id in wanted]


class JsonVendorRepository(InMemoryVendorRepository):
    """Vendor store loaded lazily from a JSON array of vendor dicts."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)
        self._loaded = False
        self._lock = Lock()

    def _all(self) -> list[Vendor]:
        with self._lock:
            if not self._loaded:
                self._vendors = sorted(self._load(), key=lambda v: v.id)
                self._loaded = True
        return self._vendors

    def _load(self) -> list[Vendor]:
        if not self.path.exists():
            logger.warning("[vendors] data file not found: %s", self.path)
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            vendors = [Vendor.from_dict(item) for item in data]
        except (OSError, ValueError, TypeError, KeyError) as e:
            raise VendorRepositoryError(f"Failed to load vendors from {self.path}: {e}") from e
        logger.info("[vendors] loaded %d vendors from %s", len(vendors), self.path)
        return vendors

    def reload(self) -> None:
        """Drop the cached vendors so the next read hits the file again."""
        with self._lock:
            self._loaded = False


class SupabaseVendorRepository(VendorRepository):
    """Vendor store backed by a Supabase ``vendors`` table."""

    def __init__(self, client: Any, table: str = "vendors"):
        self.client = client
        self.table = table

    @classmethod
    def from_config(cls, url: str, key: str) -> "SupabaseVendorRepository":
        from supabase import create_client
        return cls(create_client(url, key))

    def find_by_location(self, location: str) -> list[Vendor]:
        pattern = f"%{_escape_like(location)}%"
        rows: dict[str, dict[str, Any]] = {}
        try:
            for field_name in LOCATION_FIELDS:
                res = (
                    self.client.table(self.table)
                    .select("*")
                    .ilike(field_name, pattern)
                    .execute()
                )
                for row in res.data or []:
                    rows[str(row["id"])] = row
            vendors = [Vendor.from_dict(rows[vid]) for vid in sorted(rows)]
        except Exception as e:
            raise VendorRepositoryError(f"Vendor query failed: {e}") from e

        logger.info("[vendors] location=%s candidates=%d", location, len(vendors))
        return vendors

    def get_many(self, vendor_ids: Iterable[str]) -> list[Vendor]:
        ids = list(vendor_ids)
        if not ids:
            return []
        try:
            res = (
                self.client.table(self.table)
                .select("*")
                .in_("id", ids)
                .order("id")
                .execute()
            )
            return [Vendor.from_dict(row) for row in res.data or []]
        except Exception as e:
            raise VendorRepositoryError(f"Vendor lookup failed: {e}") from e


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the query is a plain substring match."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
