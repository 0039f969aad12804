"""rdsconnect - connect to RDS PostgreSQL instances by name."""

__version__ = "0.4.0"
