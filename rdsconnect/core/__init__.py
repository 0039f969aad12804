"""Core rdsconnect configuration."""

from __future__ import annotations

from rdsconnect.core.config import ConfigLoader, build_connect_config, resolve_profile

__all__ = ["ConfigLoader", "build_connect_config", "resolve_profile"]
