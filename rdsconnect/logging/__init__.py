"""Logging helpers for the rds CLI."""

from rdsconnect.logging.filters import StreamRoutingFilter

__all__ = ["StreamRoutingFilter"]
