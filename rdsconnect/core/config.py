import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from rdsconnect.constants import (
    CLIENT_BINARIES,
    DEFAULT_DATABASE,
    DEFAULT_HOME_REGION,
    DEFAULT_VPN_PROFILES,
    TARGET_ENGINE,
)
from rdsconnect.exceptions import ConfigLoadError
from rdsconnect.models import ConnectConfig
from rdsconnect.providers.aws.session import SessionFactory, resolve_home_region
from rdsconnect.utils import default_cache_dir

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RDS_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/rds/config.yaml")


class ConfigLoader:
    """Load optional YAML settings and merge them over built-in defaults."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "cache_dir": None,
            "database": DEFAULT_DATABASE,
            "engine": TARGET_ENGINE,
            "clients": list(CLIENT_BINARIES),
            "home_region": DEFAULT_HOME_REGION,
            "vpn_check": True,
            "vpn_profiles": dict(DEFAULT_VPN_PROFILES),
        }

    def load_config(self, config_path: str | None = None) -> dict[str, Any]:
        """Load settings from YAML and merge them over the defaults.

        Parameters
        ----------
        config_path : str | None
            Path to YAML config file. If None, checks RDS_CONFIG env var,
            then falls back to ~/.config/rds/config.yaml

        Returns
        -------
        dict[str, Any]
            Validated settings; the defaults alone when no file exists

        Raises
        ------
        ConfigLoadError
            If the file cannot be read or parsed, or a value is invalid
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, str(DEFAULT_CONFIG_PATH))

        config_file = Path(config_path).expanduser()
        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)

        if not config_file.exists():
            return merged

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.debug("Failed to parse YAML config file %s: %s", config_file, e)
            raise ConfigLoadError(f"Invalid YAML in {config_file}: {e}") from e
        except OSError as e:
            logger.debug("Failed to read config file %s: %s", config_file, e)
            raise ConfigLoadError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None:
            return merged

        try:
            loaded = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except OmegaConfBaseException as e:
            raise ConfigLoadError(f"Configuration variable resolution error: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigLoadError(f"{config_file} must contain a mapping")

        unknown = sorted(set(loaded) - set(merged))
        if unknown:
            logger.warning("Ignoring unknown settings in %s: %s", config_file, unknown)

        for key in merged:
            if key in loaded and loaded[key] is not None:
                merged[key] = loaded[key]

        self.validate_config(merged)
        return merged

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate setting types.

        Raises
        ------
        ConfigLoadError
            If a setting has the wrong type or is empty
        """
        for key in ("database", "engine", "home_region"):
            if not isinstance(config[key], str) or not config[key]:
                raise ConfigLoadError(f"{key} must be a non-empty string")

        if config["cache_dir"] is not None and not isinstance(config["cache_dir"], str):
            raise ConfigLoadError("cache_dir must be a string")

        clients = config["clients"]
        if not isinstance(clients, list) or not all(isinstance(c, str) for c in clients):
            raise ConfigLoadError("clients must be a list of strings")

        if not isinstance(config["vpn_check"], bool):
            raise ConfigLoadError("vpn_check must be a boolean")

        vpn_profiles = config["vpn_profiles"]
        if not isinstance(vpn_profiles, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in vpn_profiles.items()
        ):
            raise ConfigLoadError("vpn_profiles must map profile names to VPN names")


def resolve_profile(profile: str | None) -> str:
    """Return the explicit profile, else AWS_PROFILE, else empty for the default chain."""
    if profile:
        return profile
    return os.environ.get("AWS_PROFILE", "")


def build_connect_config(
    profile: str | None,
    region: str | None,
    settings: dict[str, Any],
    session_factory: SessionFactory | None = None,
) -> ConnectConfig:
    """Combine CLI options, settings and the AWS profile into a ConnectConfig.

    Parameters
    ----------
    profile : str | None
        ``--profile`` value
    region : str | None
        ``--region`` override
    settings : dict[str, Any]
        Output of ConfigLoader.load_config()
    session_factory : SessionFactory | None
        Optional boto3 session factory

    Raises
    ------
    ConfigLoadError
        If the AWS profile cannot be loaded
    """
    resolved_profile = resolve_profile(profile)
    home_region = resolve_home_region(
        resolved_profile, settings["home_region"], session_factory=session_factory
    )

    return ConnectConfig(
        profile=resolved_profile,
        region=region or home_region,
        home_region=home_region,
        cache_dir=default_cache_dir(settings["cache_dir"]),
        database=settings["database"],
        engine=settings["engine"],
        clients=tuple(settings["clients"]),
        vpn_check=settings["vpn_check"],
        vpn_profiles=dict(settings["vpn_profiles"]),
    )
