"""Value types shared across rdsconnect."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from rdsconnect.constants import (
    CLIENT_BINARIES,
    DEFAULT_DATABASE,
    DEFAULT_VPN_PROFILES,
    TARGET_ENGINE,
)


@dataclass(frozen=True)
class InstanceRecord:
    """One RDS instance as cached and selected.

    Attributes
    ----------
    id : str
        DB instance identifier
    host : str
        Endpoint address
    port : int
        Endpoint port
    size : str
        Instance class (e.g. ``db.t3.micro``)
    version : str
        Engine version
    source_id : str
        Replication source: empty, a plain identifier or an RDS ARN
    """

    id: str
    host: str
    port: int
    size: str = ""
    version: str = ""
    source_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InstanceRecord:
        """Build a record from its cached JSON form.

        Raises
        ------
        KeyError
            If ``id``, ``host`` or ``port`` is missing
        ValueError
            If ``port`` is not an integer
        """
        return cls(
            id=str(data["id"]),
            host=str(data["host"]),
            port=int(data["port"]),
            size=str(data.get("size") or ""),
            version=str(data.get("version") or ""),
            source_id=str(data.get("source_id") or ""),
        )


@dataclass(frozen=True)
class Credentials:
    """Database login fetched from the secret store. Never persisted."""

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ConnectConfig:
    """Immutable settings threaded through a single connect run.

    Attributes
    ----------
    profile : str
        AWS profile name
    region : str
        Region the fleet is listed in (override or home region)
    home_region : str
        Region of the base profile, where root secrets live
    cache_dir : Path
        Root directory of the instance and last-selection cache
    database : str
        Database name handed to the client
    engine : str
        RDS engine family kept from discovery
    clients : tuple[str, ...]
        External client binaries in order of preference
    vpn_check : bool
        Whether to run the advisory VPN check
    vpn_profiles : dict[str, str]
        Profile to required VPN connection name
    """

    profile: str
    region: str
    home_region: str
    cache_dir: Path
    database: str = DEFAULT_DATABASE
    engine: str = TARGET_ENGINE
    clients: tuple[str, ...] = CLIENT_BINARIES
    vpn_check: bool = True
    vpn_profiles: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_VPN_PROFILES), hash=False
    )
