#!/usr/bin/env python3
"""rds - connect to RDS PostgreSQL instances by name."""

from __future__ import annotations

import logging
import platform
import sys
from collections.abc import Callable
from typing import Any

from fire import decorators

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

from rdsconnect import __version__  # noqa: E402
from rdsconnect.connect import ConnectRunner  # noqa: E402
from rdsconnect.core.config import ConfigLoader, build_connect_config  # noqa: E402
from rdsconnect.exceptions import RdsConnectError  # noqa: E402
from rdsconnect.models import ConnectConfig  # noqa: E402
from rdsconnect.providers.aws.session import create_session  # noqa: E402
from rdsconnect.providers.aws.utils import list_aws_profiles  # noqa: E402

logger = logging.getLogger(__name__)


class RdsConnect:
    """Main CLI interface for rds."""

    def __init__(
        self,
        session_factory: Callable[..., Any] | None = None,
        runner_factory: Callable[..., ConnectRunner] | None = None,
    ) -> None:
        """Initialize RdsConnect with optional dependency injection."""
        self._config_loader = ConfigLoader()
        self._session_factory = session_factory
        self._runner_factory = runner_factory or ConnectRunner

    def _build_runner(self, profile: str | None, region: str | None) -> ConnectRunner:
        settings = self._config_loader.load_config()
        config: ConnectConfig = build_connect_config(
            profile, region, settings, session_factory=self._session_factory
        )
        session = create_session(
            config.profile, config.region, session_factory=self._session_factory
        )
        return self._runner_factory(config, session)

    @decorators.SetParseFn(str, "name", "profile", "region")
    def connect(
        self,
        name: str | None = None,
        last: bool = False,
        profile: str | None = None,
        region: str | None = None,
    ) -> int:
        """Connect to an RDS PostgreSQL instance.

        Parameters
        ----------
        name : str | None
            Instance identifier or fragment of one, taken verbatim from the
            command line (``1_000`` stays ``"1_000"``)
        last : bool
            Connect to the last used instance
        profile : str | None
            AWS profile to use (default: AWS_PROFILE)
        region : str | None
            AWS region (overrides the profile's region)

        Returns
        -------
        int
            Exit status of the launched client
        """
        runner = self._build_runner(profile, region)
        return runner.run(name=str(name) if name is not None else None, last=last)

    @decorators.SetParseFn(str, "prefix", "profile", "region")
    def complete(
        self,
        prefix: str = "",
        profile: str | None = None,
        region: str | None = None,
    ) -> None:
        """Print instance identifiers for shell completion.

        Each line is ``<id>\\t<size>`` so zsh shows the size but inserts the id.
        """
        try:
            candidates = self._build_runner(profile, region).complete(str(prefix))
        except RdsConnectError as e:
            logger.debug("Completion unavailable: %s", e)
            return

        for candidate in candidates:
            print(candidate)

    @decorators.SetParseFn(str, "prefix")
    def profiles(self, prefix: str = "") -> None:
        """Print AWS profile names for shell completion."""
        for name in list_aws_profiles(str(prefix)):
            print(name)

    def version(self) -> None:
        """Print version information."""
        print(f"rds version:    {__version__}")
        print(f"python version: {platform.python_version()}")
        print(f"os/arch:        {sys.platform}/{platform.machine()}")


if __name__ == "__main__":
    from rdsconnect.cli.main import main

    main()
