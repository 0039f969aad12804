"""Utility functions for rdsconnect."""

import logging
import os
import sys
from pathlib import Path
from typing import Any

from rdsconnect.constants import CACHE_DIR_ENV_VAR, DEFAULT_CACHE_SUBDIR


def log_and_print_error(message: str, *args: Any) -> None:
    """Log error message and print to stderr.

    Parameters
    ----------
    message : str
        Error message with optional format placeholders
    *args : Any
        Format arguments for message
    """
    logging.debug(message, *args)
    formatted_msg = message % args if args else message
    print(f"Error: {formatted_msg}", file=sys.stderr)


def default_cache_dir(configured: str | None = None) -> Path:
    """Resolve the cache root directory.

    Precedence is the ``RDS_CACHE_DIR`` environment variable, then the
    configured value, then ``~/.cache/rds``.

    Parameters
    ----------
    configured : str | None
        ``cache_dir`` from the configuration file

    Returns
    -------
    Path
        Cache root directory (not created)
    """
    env_dir = os.environ.get(CACHE_DIR_ENV_VAR)
    if env_dir:
        return Path(env_dir).expanduser()

    if configured:
        return Path(configured).expanduser()

    return Path.home().joinpath(*DEFAULT_CACHE_SUBDIR)


def atomic_file_write(path: Path, content: str) -> None:
    """Write file by writing a sibling temp file and renaming it over path.

    Readers see either the old or the new content. Not crash-safe: no fsync
    is issued.

    Parameters
    ----------
    path : Path
        Target file path
    content : str
        File content to write

    Raises
    ------
    OSError
        Propagated after removing the temp file
    """
    temp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_path, path)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise
