"""AWS-specific utility functions for rdsconnect."""

from __future__ import annotations

import configparser
import os
from pathlib import Path


def get_aws_credentials_error_message() -> str:
    """Get standard AWS credentials error message.

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    return (
        "AWS credentials not found or expired\n\n"
        "Log in again:\n"
        "  aws sso login --profile <profile>\n\n"
        "Or configure static credentials:\n"
        "  aws configure --profile <profile>"
    )


def list_aws_profiles(prefix: str = "", home: Path | None = None) -> list[str]:
    """List profile names from the shared credentials and config files.

    Parameters
    ----------
    prefix : str
        Only names starting with prefix are returned
    home : Path | None
        Home directory holding ``.aws``; defaults to the user's home

    Returns
    -------
    list[str]
        Sorted, de-duplicated profile names
    """
    aws_dir = (home or Path.home()) / ".aws"
    credentials_file = Path(
        os.environ.get("AWS_SHARED_CREDENTIALS_FILE", aws_dir / "credentials")
    )
    config_file = Path(os.environ.get("AWS_CONFIG_FILE", aws_dir / "config"))

    profiles: set[str] = set()

    for path, is_config in ((credentials_file, False), (config_file, True)):
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error:
            continue

        for section in parser.sections():
            name = section
            if is_config:
                if section.startswith("profile "):
                    name = section[len("profile ") :].strip()
                elif section != "default":
                    continue
            profiles.add(name)

    return sorted(p for p in profiles if p.startswith(prefix))
