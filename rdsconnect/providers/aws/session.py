"""boto3 session construction and home region resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ProfileNotFound

from rdsconnect.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

SessionFactory = Callable[..., Any]


def create_session(
    profile: str,
    region: str | None = None,
    session_factory: SessionFactory | None = None,
) -> Any:
    """Create a boto3 session for profile.

    Parameters
    ----------
    profile : str
        Shared config profile name; empty uses the default credential chain
    region : str | None
        Region override; None keeps the profile's configured region
    session_factory : SessionFactory | None
        Optional factory for creating sessions. If None, uses boto3.Session

    Returns
    -------
    Any
        boto3 session

    Raises
    ------
    ConfigLoadError
        If the profile does not exist or its configuration is unreadable
    """
    factory = session_factory or boto3.Session

    try:
        return factory(profile_name=profile or None, region_name=region)
    except ProfileNotFound as e:
        raise ConfigLoadError(f"load AWS config: {e}") from e
    except BotoCoreError as e:
        raise ConfigLoadError(f"load AWS config: {e}") from e


def resolve_home_region(
    profile: str,
    fallback: str,
    session_factory: SessionFactory | None = None,
) -> str:
    """Return the region of the base profile, ignoring any override.

    Root secrets live only in this region, including those of DR replicas
    running elsewhere.

    Parameters
    ----------
    profile : str
        Shared config profile name
    fallback : str
        Region used when the profile configures none

    Returns
    -------
    str
        Home region

    Raises
    ------
    ConfigLoadError
        If the profile cannot be loaded
    """
    session = create_session(profile, session_factory=session_factory)
    region = session.region_name

    if not region:
        logger.debug(
            "Profile '%s' has no region configured, using home region %s",
            profile,
            fallback,
        )
        return fallback

    return region
