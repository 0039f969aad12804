"""Command line interface for rds."""

from __future__ import annotations

from rdsconnect.cli.main import RdsConnectCLI, main

__all__ = ["RdsConnectCLI", "main"]
