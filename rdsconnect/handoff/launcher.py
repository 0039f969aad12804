"""Launch an external interactive PostgreSQL client."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from collections.abc import Callable, Iterable, Mapping

from rdsconnect.constants import CLIENT_BINARIES, PASSWORD_ENV_VAR
from rdsconnect.handoff.terminal import TerminalController
from rdsconnect.models import Credentials, InstanceRecord

logger = logging.getLogger(__name__)


def find_client_binary(
    clients: Iterable[str] = CLIENT_BINARIES,
    which: Callable[[str], str | None] = shutil.which,
) -> str | None:
    """Return the path of the first client found on PATH, in priority order."""
    for name in clients:
        path = which(name)
        if path:
            return path
    return None


def build_connect_args(
    instance: InstanceRecord, credentials: Credentials, database: str
) -> list[str]:
    return [
        "-h",
        instance.host,
        "-p",
        str(instance.port),
        "-U",
        credentials.username,
        "-d",
        database,
    ]


def build_client_env(
    credentials: Credentials, base_env: Mapping[str, str] | None = None
) -> dict[str, str]:
    env = dict(os.environ if base_env is None else base_env)
    env[PASSWORD_ENV_VAR] = credentials.password
    return env


def start_and_wait(
    argv: list[str], env: Mapping[str, str], controller: TerminalController
) -> int:
    """Run argv in its own process group and give it the terminal.

    The terminal is handed back to this process on every exit path,
    including a failed start or an interrupted wait.

    Parameters
    ----------
    argv : list[str]
        Command line of the client
    env : Mapping[str, str]
        Environment of the client
    controller : TerminalController
        Terminal ownership controller

    Returns
    -------
    int
        Exit status of the client

    Raises
    ------
    OSError
        If the client cannot be started
    """
    interactive = controller.is_interactive()

    try:
        process = subprocess.Popen(argv, env=env, process_group=0)
        if interactive:
            controller.give_to(process.pid)
        return process.wait()
    finally:
        if interactive:
            controller.reclaim()


def run_external(
    binary: str,
    instance: InstanceRecord,
    credentials: Credentials,
    database: str,
    controller: TerminalController,
) -> int:
    """Launch binary against instance and block until it exits."""
    argv = [binary, *build_connect_args(instance, credentials, database)]
    logger.info("Launching %s...", os.path.basename(binary), extra={"stream": "stdout"})

    return_code = start_and_wait(argv, build_client_env(credentials), controller)

    if return_code != 0:
        logger.debug("%s exited with code %d", binary, return_code)

    return return_code
