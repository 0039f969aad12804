"""AWS adapters: sessions, RDS discovery and Secrets Manager."""

from __future__ import annotations

from rdsconnect.providers.aws.discovery import RDSDiscovery
from rdsconnect.providers.aws.errors import handle_aws_errors
from rdsconnect.providers.aws.secrets import SecretsFetcher
from rdsconnect.providers.aws.session import create_session, resolve_home_region

__all__ = [
    "RDSDiscovery",
    "SecretsFetcher",
    "create_session",
    "handle_aws_errors",
    "resolve_home_region",
]
