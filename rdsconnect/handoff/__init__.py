"""Hand the terminal to an interactive client."""

from __future__ import annotations

from rdsconnect.handoff.launcher import (
    build_client_env,
    build_connect_args,
    find_client_binary,
    run_external,
    start_and_wait,
)
from rdsconnect.handoff.native import NativeRepl
from rdsconnect.handoff.terminal import (
    NullTerminalController,
    PosixTerminalController,
    TerminalController,
    get_terminal_controller,
)

__all__ = [
    "NativeRepl",
    "NullTerminalController",
    "PosixTerminalController",
    "TerminalController",
    "build_client_env",
    "build_connect_args",
    "find_client_binary",
    "get_terminal_controller",
    "run_external",
    "start_and_wait",
]
