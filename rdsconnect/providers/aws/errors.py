"""Translate botocore failures into provider exceptions."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
    PartialCredentialsError,
    ProfileNotFound,
    SSOTokenLoadError,
    TokenRetrievalError,
    UnauthorizedSSOTokenError,
)

from rdsconnect.exceptions import (
    ConfigLoadError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)

CREDENTIAL_ERRORS = (
    NoCredentialsError,
    PartialCredentialsError,
    SSOTokenLoadError,
    TokenRetrievalError,
    UnauthorizedSSOTokenError,
)


@contextmanager
def handle_aws_errors() -> Iterator[None]:
    """Re-raise botocore exceptions as provider exceptions.

    Raises
    ------
    ProviderCredentialsError
        If credentials are missing, partial or the SSO session expired
    ConfigLoadError
        If the profile does not exist or no region can be determined
    ProviderConnectionError
        If the endpoint is unreachable
    ProviderAPIError
        For any API error response
    """
    try:
        yield
    except CREDENTIAL_ERRORS as e:
        raise ProviderCredentialsError(str(e)) from e
    except ProfileNotFound as e:
        raise ConfigLoadError(str(e)) from e
    except NoRegionError as e:
        raise ConfigLoadError(str(e)) from e
    except EndpointConnectionError as e:
        raise ProviderConnectionError(str(e)) from e
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ProviderAPIError(
            message=error.get("Message") or str(e),
            error_code=error.get("Code"),
        ) from e
