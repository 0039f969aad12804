"""On-disk cache of the RDS fleet and of the last selected instance.

Two kinds of files live under the cache root:

``<profile>_<region>_instances.json``
    Versioned envelope ``{"version": ..., "instances": [...]}``. Usable only
    while the version tag matches CACHE_VERSION and the file is younger than
    CACHE_TTL_SECONDS.
``<profile>_last_connected``
    Raw identifier of the last instance a client was launched against.

The cache is best-effort: any failure to read it means "refetch", and any
failure to write it is logged and ignored.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path

from rdsconnect.constants import CACHE_TTL_SECONDS, CACHE_VERSION
from rdsconnect.exceptions import NotFoundError
from rdsconnect.models import InstanceRecord
from rdsconnect.utils import atomic_file_write

logger = logging.getLogger(__name__)


def instances_key(profile: str, region: str) -> str:
    return f"{profile or 'default'}_{region}"


def last_selection_key(profile: str) -> str:
    return profile or "default"


class CacheStore:
    """Read and write cache files under a single root directory.

    Parameters
    ----------
    cache_dir : Path
        Cache root; created lazily on first write
    ttl_seconds : float
        Freshness window for instance lists
    """

    def __init__(self, cache_dir: Path, ttl_seconds: float = CACHE_TTL_SECONDS) -> None:
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds

    def instances_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}_instances.json"

    def last_selection_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}_last_connected"

    def load(self, key: str) -> list[InstanceRecord] | None:
        """Return the cached instance list, or None when it must be refetched.

        Parameters
        ----------
        key : str
            Cache key from instances_key()

        Returns
        -------
        list[InstanceRecord] | None
            Cached records in discovery order, or None if the file is missing,
            unreadable, stale or carries another version tag
        """
        path = self.instances_path(key)

        try:
            age = time.time() - path.stat().st_mtime
            raw = path.read_text(encoding="utf-8")
        except OSError:
            return None

        if age >= self.ttl_seconds:
            logger.debug("Instance cache %s is stale (%.0fs old)", path, age)
            return None

        try:
            envelope = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug("Ignoring unreadable instance cache %s: %s", path, e)
            return None

        if not isinstance(envelope, dict) or envelope.get("version") != CACHE_VERSION:
            logger.debug("Instance cache %s has a different version, ignoring", path)
            return None

        try:
            return [InstanceRecord.from_dict(item) for item in envelope.get("instances") or []]
        except (KeyError, TypeError, ValueError) as e:
            logger.debug("Ignoring malformed instance cache %s: %s", path, e)
            return None

    def save(self, key: str, records: list[InstanceRecord]) -> None:
        """Replace the cached instance list for key.

        Parameters
        ----------
        key : str
            Cache key from instances_key()
        records : list[InstanceRecord]
            Full fleet listing, in discovery order
        """
        envelope = {
            "version": CACHE_VERSION,
            "instances": [record.to_dict() for record in records],
        }
        self._write(self.instances_path(key), json.dumps(envelope))

    def save_last_selection(self, key: str, instance_id: str) -> None:
        self._write(self.last_selection_path(key), instance_id)

    def load_last_selection(self, key: str) -> str:
        """Return the last selected instance identifier.

        Raises
        ------
        NotFoundError
            If no selection was ever recorded for key
        """
        try:
            return self.last_selection_path(key).read_text(encoding="utf-8").strip()
        except OSError as e:
            raise NotFoundError(f"no history found for profile '{key}'") from e

    def _write(self, path: Path, content: str) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            atomic_file_write(path, content)
        except OSError as e:
            logger.debug("Failed to write cache file %s: %s", path, e)
