"""Terminal foreground process group control.

While an external client runs, the terminal's foreground process group is
handed to the client's group so that Ctrl+C reaches only the client. If the
parent also received SIGINT it would unwind mid-query and leave the terminal
in a state that breaks the client's next prompt (pgcli then fails with
termios.error). After the client exits the parent takes the terminal back.
"""

from __future__ import annotations

import logging
import os
import platform
import signal
from typing import Protocol

logger = logging.getLogger(__name__)


class TerminalController(Protocol):
    """Transfer terminal ownership between the parent and a child group."""

    def is_interactive(self) -> bool:
        ...

    def give_to(self, pgid: int) -> None:
        ...

    def reclaim(self) -> None:
        ...


class NullTerminalController:
    """No-op controller for non-interactive input or platforms without job control."""

    def is_interactive(self) -> bool:
        return False

    def give_to(self, pgid: int) -> None:
        return None

    def reclaim(self) -> None:
        return None


class PosixTerminalController:
    """Job control through ``tcsetpgrp`` on a terminal file descriptor.

    Parameters
    ----------
    fd : int
        Terminal file descriptor, standard input by default
    """

    def __init__(self, fd: int = 0) -> None:
        self.fd = fd

    def is_interactive(self) -> bool:
        return os.isatty(self.fd)

    def give_to(self, pgid: int) -> None:
        """Make pgid the foreground group and resume it.

        The child may have touched the terminal before the transfer and been
        stopped with SIGTTIN/SIGTTOU, so the group gets SIGCONT afterwards.
        """
        self._set_foreground(pgid)

        try:
            os.killpg(pgid, signal.SIGCONT)
        except ProcessLookupError:
            pass

    def reclaim(self) -> None:
        self._set_foreground(os.getpgrp())

    def _set_foreground(self, pgid: int) -> None:
        # Changing the foreground group from a background group raises SIGTTOU.
        previous = signal.signal(signal.SIGTTOU, signal.SIG_IGN)
        try:
            os.tcsetpgrp(self.fd, pgid)
        except OSError as e:
            logger.debug("tcsetpgrp(%d, %d) failed: %s", self.fd, pgid, e)
        finally:
            signal.signal(signal.SIGTTOU, previous)


def get_terminal_controller(fd: int = 0) -> TerminalController:
    """Return the controller suitable for fd on this platform."""
    if platform.system() == "Windows" or not hasattr(os, "tcsetpgrp"):
        return NullTerminalController()

    try:
        interactive = os.isatty(fd)
    except OSError:
        interactive = False

    if not interactive:
        return NullTerminalController()

    return PosixTerminalController(fd)
