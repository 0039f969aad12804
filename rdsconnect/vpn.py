"""Advisory VPN check through the Pritunl CLI.

The check never blocks a connection: a missing or failing Pritunl CLI skips
it silently, and a failed validation is only reported as a warning.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from rdsconnect.constants import (
    DEFAULT_VPN_PROFILES,
    PRITUNL_CLIENT_ENV_VAR,
    PRITUNL_CLIENT_PATH,
    VPN_CHECK_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PritunlConnection:
    name: str
    connected: bool


def validate_pritunl_connections(
    connections: list[PritunlConnection],
    profile: str,
    vpn_profiles: Mapping[str, str] = DEFAULT_VPN_PROFILES,
) -> str | None:
    """Check connections against the VPN required for profile.

    Parameters
    ----------
    connections : list[PritunlConnection]
        Connections reported by Pritunl
    profile : str
        AWS profile being used
    vpn_profiles : Mapping[str, str]
        Profile to required connection name

    Returns
    -------
    str | None
        Problem description, or None if the VPN state is acceptable
    """
    required = vpn_profiles.get(profile)

    for conn in connections:
        if not conn.connected:
            continue
        if required is None or required in conn.name:
            return None

    if required is not None:
        return f"required VPN profile '{required}' is not connected"
    return "no active VPN connection found"


def parse_pritunl_output(output: str) -> list[PritunlConnection]:
    """Parse ``pritunl-client list -j`` output.

    Raises
    ------
    ValueError
        If output is not a JSON array of objects
    """
    data = json.loads(output)
    if not isinstance(data, list):
        raise ValueError("expected a JSON array")

    return [
        PritunlConnection(name=str(item.get("name", "")), connected=bool(item.get("connected")))
        for item in data
        if isinstance(item, dict)
    ]


def check_vpn_with_pritunl(
    profile: str, vpn_profiles: Mapping[str, str] = DEFAULT_VPN_PROFILES
) -> str | None:
    """Return a problem description if the VPN for profile looks down.

    Returns None when the VPN is fine and whenever the check cannot be
    performed. A missing Pritunl CLI is skipped quietly, since users may
    connect through another client. A CLI that fails or prints unreadable
    output is reported as a warning.
    """
    binary = Path(os.environ.get(PRITUNL_CLIENT_ENV_VAR, PRITUNL_CLIENT_PATH))
    if not binary.exists():
        logger.debug("Pritunl CLI not found at %s, skipping VPN check", binary)
        return None

    try:
        result = subprocess.run(
            [str(binary), "list", "-j"],
            capture_output=True,
            text=True,
            timeout=VPN_CHECK_TIMEOUT_SECONDS,
            check=True,
        )
        connections = parse_pritunl_output(result.stdout)
    except (OSError, subprocess.SubprocessError, ValueError) as e:
        logger.warning("VPN check skipped: %s", e)
        return None

    return validate_pritunl_connections(connections, profile, vpn_profiles)


def warn_if_vpn_down(profile: str, vpn_profiles: Mapping[str, str]) -> None:
    problem = check_vpn_with_pritunl(profile, vpn_profiles)
    if problem:
        logger.warning("VPN check: %s (continuing anyway)", problem)
