"""Tests for terminal foreground process group control."""

import signal
from unittest.mock import MagicMock, call, patch

from rdsconnect.handoff.terminal import (
    NullTerminalController,
    PosixTerminalController,
    get_terminal_controller,
)


def test_null_controller_is_inert() -> None:
    controller = NullTerminalController()

    assert controller.is_interactive() is False
    assert controller.give_to(123) is None
    assert controller.reclaim() is None


@patch("rdsconnect.handoff.terminal.signal.signal")
@patch("rdsconnect.handoff.terminal.os")
def test_give_to_sets_foreground_and_resumes_group(
    mock_os: MagicMock, mock_signal: MagicMock
) -> None:
    mock_signal.return_value = signal.SIG_DFL

    PosixTerminalController(fd=0).give_to(4242)

    mock_os.tcsetpgrp.assert_called_once_with(0, 4242)
    mock_os.killpg.assert_called_once_with(4242, signal.SIGCONT)
    assert mock_signal.call_args_list == [
        call(signal.SIGTTOU, signal.SIG_IGN),
        call(signal.SIGTTOU, signal.SIG_DFL),
    ]


@patch("rdsconnect.handoff.terminal.signal.signal")
@patch("rdsconnect.handoff.terminal.os")
def test_reclaim_restores_parent_group(mock_os: MagicMock, mock_signal: MagicMock) -> None:
    mock_os.getpgrp.return_value = 100

    PosixTerminalController(fd=0).reclaim()

    mock_os.tcsetpgrp.assert_called_once_with(0, 100)


@patch("rdsconnect.handoff.terminal.signal.signal")
@patch("rdsconnect.handoff.terminal.os")
def test_tcsetpgrp_failure_is_tolerated_and_sigttou_restored(
    mock_os: MagicMock, mock_signal: MagicMock
) -> None:
    mock_os.getpgrp.return_value = 100
    mock_os.tcsetpgrp.side_effect = OSError("Inappropriate ioctl for device")
    previous = MagicMock()
    mock_signal.return_value = previous

    PosixTerminalController(fd=0).reclaim()

    assert mock_signal.call_args_list[-1] == call(signal.SIGTTOU, previous)


@patch("rdsconnect.handoff.terminal.signal.signal")
@patch("rdsconnect.handoff.terminal.os")
def test_give_to_tolerates_exited_child(mock_os: MagicMock, mock_signal: MagicMock) -> None:
    mock_os.killpg.side_effect = ProcessLookupError

    PosixTerminalController(fd=0).give_to(4242)

    mock_os.tcsetpgrp.assert_called_once_with(0, 4242)


@patch("rdsconnect.handoff.terminal.os.isatty", return_value=False)
def test_non_tty_gets_null_controller(mock_isatty: MagicMock) -> None:
    assert isinstance(get_terminal_controller(0), NullTerminalController)


@patch("rdsconnect.handoff.terminal.platform.system", return_value="Linux")
@patch("rdsconnect.handoff.terminal.os.isatty", return_value=True)
def test_tty_gets_posix_controller(mock_isatty: MagicMock, mock_system: MagicMock) -> None:
    controller = get_terminal_controller(0)

    assert isinstance(controller, PosixTerminalController)
    assert controller.fd == 0


@patch("rdsconnect.handoff.terminal.platform.system", return_value="Windows")
def test_windows_gets_null_controller(mock_system: MagicMock) -> None:
    assert isinstance(get_terminal_controller(0), NullTerminalController)
