"""Exception hierarchy for rdsconnect.

All errors raised on purpose derive from RdsConnectError so the CLI layer can
turn them into a message and an exit code. Provider errors wrap botocore
failures so callers never depend on botocore exception types directly.
"""

from __future__ import annotations


class RdsConnectError(Exception):
    """Base class for all rdsconnect errors."""


class NotFoundError(RdsConnectError):
    """No instance matched, or no usable last-selection history exists."""


class SelectionCancelledError(NotFoundError):
    """The user dismissed the interactive picker without choosing."""


class CredentialFetchError(RdsConnectError):
    """Credentials could not be fetched or parsed from the secret store.

    Parameters
    ----------
    secret_name : str
        Secret that was looked up
    region : str
        Region the lookup was scoped to
    reason : str
        Underlying failure description
    """

    def __init__(self, secret_name: str, region: str, reason: str) -> None:
        self.secret_name = secret_name
        self.region = region
        self.reason = reason
        super().__init__(
            f"failed to fetch secret '{secret_name}' in {region}: {reason}"
        )


class ConfigLoadError(RdsConnectError):
    """AWS profile or rdsconnect configuration could not be loaded."""


class ConnectionFailedError(RdsConnectError):
    """The native fallback could not open or verify a database connection."""


class ProviderError(RdsConnectError):
    """Base class for cloud provider errors."""


class ProviderCredentialsError(ProviderError):
    """Cloud provider credentials are missing or invalid."""


class ProviderAPIError(ProviderError):
    """A cloud provider API call failed.

    Parameters
    ----------
    message : str
        Error description
    error_code : str | None
        Provider error code (e.g. ``AccessDeniedException``)
    """

    def __init__(self, message: str, error_code: str | None = None) -> None:
        self.error_code = error_code
        super().__init__(message)


class ProviderConnectionError(ProviderError):
    """The cloud provider endpoint could not be reached."""
