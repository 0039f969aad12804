"""Instance discovery with caching, and selection of a single target.

Selection is evaluated in strict priority order:

1. A name fragment: exact identifier match, else the unique substring
   match, else the picker over all substring matches.
2. ``--last``: the identifier recorded by the previous connection.
3. Otherwise the picker over the whole fleet.

Matching is case-sensitive.
"""

from __future__ import annotations

import logging
from typing import Protocol

from rdsconnect.cache import CacheStore, instances_key, last_selection_key
from rdsconnect.exceptions import NotFoundError
from rdsconnect.models import ConnectConfig, InstanceRecord
from rdsconnect.picker import Picker, pick_instance

logger = logging.getLogger(__name__)


class InstanceDiscovery(Protocol):
    def list_instances(self, engine: str) -> list[InstanceRecord]:
        ...


def get_instances_with_cache(
    cache: CacheStore, discovery: InstanceDiscovery, config: ConnectConfig
) -> list[InstanceRecord]:
    """Return the fleet for config's profile and region.

    A fresh cache entry is returned as is. Otherwise the fleet is listed
    through discovery, filtered to config.engine and cached before returning.

    Raises
    ------
    ProviderError
        If discovery fails; nothing is cached in that case
    """
    key = instances_key(config.profile, config.region)
    cached = cache.load(key)

    if cached is not None:
        logger.debug("Using %d cached instances for %s", len(cached), key)
        return cached

    logger.info("Fetching RDS instances [%s:%s]...", config.profile, config.region)

    instances = discovery.list_instances(config.engine)
    cache.save(key, instances)

    return instances


def find_by_name(
    instances: list[InstanceRecord], name: str, picker: Picker
) -> InstanceRecord:
    """Resolve a name fragment to exactly one instance.

    Raises
    ------
    NotFoundError
        If no identifier contains name
    SelectionCancelledError
        If several match and the user dismisses the picker
    """
    for instance in instances:
        if instance.id == name:
            return instance

    matches = [i for i in instances if name in i.id]

    if len(matches) == 1:
        return matches[0]

    if matches:
        return pick_instance(matches, picker, title=f"Instances matching '{name}'")

    raise NotFoundError(f"no instance matching '{name}'")


def load_last_connected(
    instances: list[InstanceRecord], profile: str, cache: CacheStore
) -> InstanceRecord:
    """Return the instance recorded by the last successful launch.

    Raises
    ------
    NotFoundError
        If no history exists, or the recorded instance is no longer listed
    """
    key = last_selection_key(profile)

    try:
        last_id = cache.load_last_selection(key)
    except NotFoundError as e:
        raise NotFoundError(f"no history found for profile '{key}'") from e

    for instance in instances:
        if instance.id == last_id:
            return instance

    raise NotFoundError(f"last used instance '{last_id}' not found in current profile")


def select_instance(
    instances: list[InstanceRecord],
    *,
    name: str | None,
    last: bool,
    profile: str,
    cache: CacheStore,
    picker: Picker,
) -> InstanceRecord:
    """Pick exactly one instance according to the selection policy."""
    if name:
        return find_by_name(instances, name, picker)

    if last:
        return load_last_connected(instances, profile, cache)

    if not instances:
        raise NotFoundError(f"no instances found for profile '{profile}'")

    return pick_instance(instances, picker)
