"""Global constants for rdsconnect.

This module contains application-wide constants shared by the cache, the
resolvers and the process handoff.
"""

CACHE_VERSION = "v2"
"""Schema tag stamped on every cached instance list.

Bump whenever InstanceRecord or the envelope layout changes. A cache file
carrying any other tag is ignored and refetched, never migrated.
"""

CACHE_TTL_SECONDS = 3600
"""Freshness window for the cached instance list in seconds.

A cache file whose modification time is older than this is treated as
absent and the fleet is listed again.
"""

CACHE_DIR_ENV_VAR = "RDS_CACHE_DIR"
"""Environment variable overriding the cache root directory."""

DEFAULT_CACHE_SUBDIR = (".cache", "rds")
"""Cache root below the user's home directory when nothing else is set."""

TARGET_ENGINE = "postgres"
"""RDS engine family kept from discovery. Other engines are discarded."""

DEFAULT_DATABASE = "postgres"
"""Database name passed to the interactive client."""

DEFAULT_HOME_REGION = "ap-south-1"
"""Region owning the root secrets when the profile has no region configured."""

ARN_PREFIX = "arn:aws:rds:"
"""Prefix identifying a replication source given as a fully qualified ARN."""

ARN_IDENTIFIER_INDEX = 6
"""Zero-based position of the DB identifier in a colon-split RDS ARN.

``arn:aws:rds:<region>:<account>:db:<identifier>``
"""

SECRET_NAME_PREFIX = "root"
"""Namespace prefix of the Secrets Manager secret holding root credentials."""

SECRET_NAME_SUFFIX = "psql"
"""Suffix of the Secrets Manager secret holding root credentials."""

CLIENT_BINARIES = ("pgcli", "psql")
"""External interactive clients, in order of preference."""

PASSWORD_ENV_VAR = "PGPASSWORD"
"""Environment variable carrying the password to the external client.

Used instead of argv so the password never shows up in process listings.
"""

NATIVE_EXIT_KEYWORDS = frozenset(("exit", "quit"))
"""Input lines that end the native fallback REPL."""

NATIVE_PROBE_QUERY = "SELECT 1"
"""Round-trip query used to verify a native connection before the REPL starts."""

NATIVE_CONNECT_TIMEOUT_SECONDS = 10
"""Timeout in seconds for the native fallback connection attempt."""

PRITUNL_CLIENT_PATH = "/Applications/Pritunl.app/Contents/Resources/pritunl-client"
"""Default location of the Pritunl CLI used for the advisory VPN check."""

PRITUNL_CLIENT_ENV_VAR = "RDS_PRITUNL_CLIENT"
"""Environment variable overriding the Pritunl CLI location."""

VPN_CHECK_TIMEOUT_SECONDS = 5
"""Timeout in seconds for the Pritunl status command."""

DEFAULT_VPN_PROFILES = {
    "ackodev": "sso_ackodevvpnusers",
    "ackoprod": "sso_ackoprodvpnusers",
    "ackolife": "sso_ackolifevpnusers",
    "ackodrive": "sso_ackodrive_prod",
}
"""AWS profile to required Pritunl connection name.

Profiles missing from the mapping are satisfied by any connected VPN.
"""

PICKER_TITLE = "Select RDS Instance"
"""Header shown above the interactive instance picker."""

EXIT_SUCCESS = 0
"""Exit code indicating successful program completion."""

EXIT_ERROR = 1
"""Exit code indicating a general application error."""

EXIT_CONFIG_ERROR = 2
"""Exit code indicating a configuration error."""

EXIT_CANCELLED = 130
"""Exit code used when the user cancels the picker, as for SIGINT."""
