"""CLI entry point for rds."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable
from typing import Any

import fire
from fire import decorators

from rdsconnect.constants import (
    EXIT_CANCELLED,
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
)
from rdsconnect.exceptions import (
    ConfigLoadError,
    ConnectionFailedError,
    CredentialFetchError,
    NotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    SelectionCancelledError,
)
from rdsconnect.logging import StreamRoutingFilter
from rdsconnect.providers.aws.utils import get_aws_credentials_error_message
from rdsconnect.utils import log_and_print_error

DEBUG_ENV_VAR = "RDS_DEBUG"

EXPIRED_TOKEN_CODES = ("ExpiredToken", "ExpiredTokenException", "RequestExpired")


def get_rdsconnect_base_class() -> type:
    """Get RdsConnect base class on-demand to avoid circular imports.

    Returns
    -------
    type
        RdsConnect base class
    """
    from rdsconnect.__main__ import RdsConnect

    return RdsConnect


class RdsConnectCLI:
    """CLI wrapper that turns the client's exit status into the process exit code.

    This is defined as a factory that creates a subclass of RdsConnect at
    runtime to avoid circular import issues.

    Parameters
    ----------
    session_factory : Callable[..., Any] | None
        Optional boto3 session factory. If None, uses boto3.Session
    """

    _cached_class: type | None = None

    def __new__(cls, session_factory: Callable[..., Any] | None = None) -> Any:
        if cls._cached_class is None:
            RdsConnect = get_rdsconnect_base_class()

            class RdsConnectCLIImpl(RdsConnect):
                """CLI wrapper implementation for RdsConnect."""

                @decorators.SetParseFn(str, "name", "profile", "region")
                def connect(
                    self,
                    name: str | None = None,
                    last: bool = False,
                    profile: str | None = None,
                    region: str | None = None,
                ) -> None:
                    """Connect to an RDS PostgreSQL instance.

                    Parameters
                    ----------
                    name : str | None
                        Instance identifier or fragment of one
                    last : bool
                        Connect to the last used instance
                    profile : str | None
                        AWS profile to use (default: AWS_PROFILE)
                    region : str | None
                        AWS region (overrides the profile's region)
                    """
                    exit_code = super().connect(
                        name=name, last=last, profile=profile, region=region
                    )

                    if exit_code != EXIT_SUCCESS:
                        sys.exit(exit_code)

            cls._cached_class = RdsConnectCLIImpl

        return cls._cached_class(session_factory=session_factory)


def handle_not_found(error: NotFoundError, debug_mode: bool) -> None:
    """Handle a failed instance selection.

    Raises
    ------
    NotFoundError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    if isinstance(error, SelectionCancelledError):
        print("Selection cancelled", file=sys.stderr)
        sys.exit(EXIT_CANCELLED)

    log_and_print_error("selection: %s", error)
    sys.exit(EXIT_ERROR)


def handle_credential_error(error: CredentialFetchError, debug_mode: bool) -> None:
    """Handle a secret lookup failure.

    Raises
    ------
    CredentialFetchError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    log_and_print_error("secrets: %s", error)
    if error.reason in ("ResourceNotFoundException", "AccessDeniedException"):
        print(
            f"\nCheck that '{error.secret_name}' exists in {error.region} "
            "and that your role may read it.",
            file=sys.stderr,
        )
    sys.exit(EXIT_ERROR)


def handle_config_error(error: ConfigLoadError, debug_mode: bool) -> None:
    """Handle an unloadable AWS profile or configuration file.

    Raises
    ------
    ConfigLoadError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(EXIT_CONFIG_ERROR)


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle missing or expired AWS credentials.

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(EXIT_ERROR)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider API error with context-specific messages.

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    if error.error_code in EXPIRED_TOKEN_CODES:
        print("AWS credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using AWS SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    elif error.error_code in ("AccessDenied", "AccessDeniedException", "UnauthorizedOperation"):
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print("Your role needs rds:DescribeDBInstances.", file=sys.stderr)
    else:
        print(f"fetch instances: {error}", file=sys.stderr)

    sys.exit(EXIT_ERROR)


def handle_connection_error(error: Exception, debug_mode: bool) -> None:
    """Handle an unreachable endpoint or a failed native connection.

    Raises
    ------
    Exception
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    log_and_print_error("%s", error)
    sys.exit(EXIT_ERROR)


def configure_logging(debug_mode: bool) -> None:
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(logging.Formatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.INFO,
        handlers=[stdout_handler, stderr_handler],
    )

    for noisy in ["botocore", "boto3", "urllib3"]:
        logging.getLogger(noisy).setLevel(logging.WARNING)


def main() -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the public methods of RdsConnect to subcommands
    (``rds connect``, ``rds complete``, ``rds profiles``, ``rds version``).
    Set RDS_DEBUG=1 to get tracebacks instead of short messages.
    """
    debug_mode = os.environ.get(DEBUG_ENV_VAR) == "1"
    configure_logging(debug_mode)

    try:
        fire.Fire(RdsConnectCLI(), name="rds")
    except NotFoundError as e:
        handle_not_found(e, debug_mode)
    except CredentialFetchError as e:
        handle_credential_error(e, debug_mode)
    except ConfigLoadError as e:
        handle_config_error(e, debug_mode)
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except (ProviderConnectionError, ConnectionFailedError, OSError) as e:
        handle_connection_error(e, debug_mode)
