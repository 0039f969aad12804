"""Map a selected instance to its root credentials.

Root credentials are stored as ``root/<identifier>/psql`` secrets. A DR
replica has no secret of its own: its credentials belong to the master it
replicates from, and that secret lives only in the home region.
"""

from __future__ import annotations

import logging
from typing import Protocol

from rdsconnect.constants import (
    ARN_IDENTIFIER_INDEX,
    ARN_PREFIX,
    SECRET_NAME_PREFIX,
    SECRET_NAME_SUFFIX,
)
from rdsconnect.models import ConnectConfig, Credentials, InstanceRecord

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    def fetch(self, secret_name: str, region: str) -> Credentials:
        ...


def secret_target_id(instance: InstanceRecord) -> str:
    """Return the identifier whose secret holds instance's credentials.

    A short or malformed ARN is ignored and the instance's own identifier is
    used.
    """
    source = instance.source_id

    if not source:
        return instance.id

    if source.startswith(ARN_PREFIX):
        parts = source.split(":")
        if len(parts) > ARN_IDENTIFIER_INDEX:
            return parts[ARN_IDENTIFIER_INDEX]
        return instance.id

    return source


def secret_name(target_id: str) -> str:
    return f"{SECRET_NAME_PREFIX}/{target_id}/{SECRET_NAME_SUFFIX}"


def is_dr_replica(instance: InstanceRecord) -> bool:
    """True when instance replicates from a master named by ARN."""
    return instance.source_id.startswith(ARN_PREFIX) and (
        secret_target_id(instance) != instance.id
    )


def resolve_credentials(
    instance: InstanceRecord, config: ConnectConfig, source: CredentialSource
) -> Credentials:
    """Fetch credentials for instance from the home region.

    Raises
    ------
    CredentialFetchError
        If the secret cannot be fetched or decoded
    """
    target = secret_target_id(instance)

    if is_dr_replica(instance):
        logger.info(
            "DR replica detected. Fetching master secret '%s' from primary region: %s",
            target,
            config.home_region,
        )

    return source.fetch(secret_name(target), config.home_region)
