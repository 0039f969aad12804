"""RDS fleet discovery."""

from __future__ import annotations

import logging
from typing import Any

from rdsconnect.models import InstanceRecord
from rdsconnect.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


def instance_from_description(db: dict[str, Any]) -> InstanceRecord | None:
    """Convert one describe_db_instances entry into an InstanceRecord.

    Parameters
    ----------
    db : dict[str, Any]
        Entry of the ``DBInstances`` list

    Returns
    -------
    InstanceRecord | None
        The record, or None when the instance has no endpoint yet
    """
    endpoint = db.get("Endpoint") or {}
    if not endpoint.get("Address"):
        return None

    return InstanceRecord(
        id=db["DBInstanceIdentifier"],
        host=endpoint["Address"],
        port=int(endpoint.get("Port") or 0),
        size=db.get("DBInstanceClass", ""),
        version=db.get("EngineVersion", ""),
        source_id=db.get("ReadReplicaSourceDBInstanceIdentifier", ""),
    )


class RDSDiscovery:
    """List RDS instances of one engine family in one region.

    Parameters
    ----------
    session : Any
        boto3 session bound to the profile
    region : str
        Region to list
    """

    def __init__(self, session: Any, region: str) -> None:
        self.region = region
        self.rds_client = session.client("rds", region_name=region)

    def list_instances(self, engine: str) -> list[InstanceRecord]:
        """Return every instance running engine, in the order RDS returns them.

        Parameters
        ----------
        engine : str
            Engine name to keep (e.g. ``postgres``); others are discarded

        Returns
        -------
        list[InstanceRecord]
            Matching instances

        Raises
        ------
        ProviderCredentialsError
            If credentials are missing or expired
        ProviderAPIError
            If the describe call fails
        """
        instances = []

        with handle_aws_errors():
            paginator = self.rds_client.get_paginator("describe_db_instances")

            for page in paginator.paginate():
                for db in page.get("DBInstances", []):
                    if db.get("Engine") != engine:
                        continue

                    record = instance_from_description(db)
                    if record is None:
                        logger.debug(
                            "Skipping %s: no endpoint yet", db.get("DBInstanceIdentifier")
                        )
                        continue

                    instances.append(record)

        return instances
