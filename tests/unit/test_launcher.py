"""Tests for launching external clients and terminal ownership transfer."""

import logging
from unittest.mock import MagicMock, call, patch

import pytest

from rdsconnect.handoff.launcher import (
    build_client_env,
    build_connect_args,
    find_client_binary,
    run_external,
    start_and_wait,
)
from rdsconnect.models import Credentials, InstanceRecord


class RecordingController:
    """Terminal controller recording ownership transitions."""

    def __init__(self, interactive: bool = True) -> None:
        self.interactive = interactive
        self.events: list[tuple[str, int | None]] = []

    def is_interactive(self) -> bool:
        return self.interactive

    def give_to(self, pgid: int) -> None:
        self.events.append(("give_to", pgid))

    def reclaim(self) -> None:
        self.events.append(("reclaim", None))


class TestFindClientBinary:
    def test_prefers_pgcli(self) -> None:
        which = {"pgcli": "/usr/bin/pgcli", "psql": "/usr/bin/psql"}.get

        assert find_client_binary(which=which) == "/usr/bin/pgcli"

    def test_falls_back_to_psql(self) -> None:
        which = {"psql": "/usr/bin/psql"}.get

        assert find_client_binary(which=which) == "/usr/bin/psql"

    def test_none_found(self) -> None:
        assert find_client_binary(which=lambda name: None) is None

    def test_respects_configured_order(self) -> None:
        which = {"pgcli": "/usr/bin/pgcli", "psql": "/usr/bin/psql"}.get

        assert find_client_binary(["psql", "pgcli"], which=which) == "/usr/bin/psql"


class TestBuildConnectArgs:
    def test_argument_vector(self) -> None:
        instance = InstanceRecord(id="x", host="db.example.com", port=5432)
        creds = Credentials(username="admin", password="secret")

        assert build_connect_args(instance, creds, "postgres") == [
            "-h", "db.example.com", "-p", "5432", "-U", "admin", "-d", "postgres",
        ]

    def test_password_never_in_arguments(
        self, metabase_instance: InstanceRecord, credentials: Credentials
    ) -> None:
        args = build_connect_args(metabase_instance, credentials, "postgres")

        assert credentials.password not in args


def test_client_env_carries_password(credentials: Credentials) -> None:
    env = build_client_env(credentials, {"PATH": "/usr/bin", "PGPASSWORD": "stale"})

    assert env == {"PATH": "/usr/bin", "PGPASSWORD": "test-secret"}


class TestStartAndWait:
    @patch("rdsconnect.handoff.launcher.subprocess.Popen")
    def test_child_gets_own_group_and_terminal(self, mock_popen: MagicMock) -> None:
        process = MagicMock(pid=4242)
        process.wait.return_value = 0
        mock_popen.return_value = process
        controller = RecordingController()

        code = start_and_wait(["psql"], {"A": "1"}, controller)

        assert code == 0
        mock_popen.assert_called_once_with(["psql"], env={"A": "1"}, process_group=0)
        assert controller.events == [("give_to", 4242), ("reclaim", None)]

    @patch("rdsconnect.handoff.launcher.subprocess.Popen")
    def test_nonzero_exit_still_reclaims(self, mock_popen: MagicMock) -> None:
        mock_popen.return_value = MagicMock(pid=7, **{"wait.return_value": 2})
        controller = RecordingController()

        assert start_and_wait(["pgcli"], {}, controller) == 2
        assert controller.events[-1] == ("reclaim", None)

    @patch("rdsconnect.handoff.launcher.subprocess.Popen")
    def test_failed_start_still_reclaims(self, mock_popen: MagicMock) -> None:
        mock_popen.side_effect = FileNotFoundError("pgcli")
        controller = RecordingController()

        with pytest.raises(FileNotFoundError):
            start_and_wait(["pgcli"], {}, controller)

        assert controller.events == [("reclaim", None)]

    @patch("rdsconnect.handoff.launcher.subprocess.Popen")
    def test_interrupted_wait_still_reclaims(self, mock_popen: MagicMock) -> None:
        process = MagicMock(pid=9)
        process.wait.side_effect = KeyboardInterrupt
        mock_popen.return_value = process
        controller = RecordingController()

        with pytest.raises(KeyboardInterrupt):
            start_and_wait(["pgcli"], {}, controller)

        assert controller.events == [("give_to", 9), ("reclaim", None)]

    @patch("rdsconnect.handoff.launcher.subprocess.Popen")
    def test_non_interactive_skips_transfer(self, mock_popen: MagicMock) -> None:
        mock_popen.return_value = MagicMock(pid=11, **{"wait.return_value": 0})
        controller = RecordingController(interactive=False)

        start_and_wait(["psql"], {}, controller)

        assert controller.events == []


@patch("rdsconnect.handoff.launcher.start_and_wait", return_value=3)
def test_run_external_wires_argv_and_env(
    mock_start: MagicMock, metabase_instance: InstanceRecord, credentials: Credentials
) -> None:
    controller = RecordingController()

    code = run_external("/usr/bin/pgcli", metabase_instance, credentials, "postgres", controller)

    assert code == 3
    argv, env, passed_controller = mock_start.call_args.args
    assert argv[0] == "/usr/bin/pgcli"
    assert argv[1:] == build_connect_args(metabase_instance, credentials, "postgres")
    assert env["PGPASSWORD"] == "test-secret"
    assert passed_controller is controller
    assert mock_start.call_args_list == [call(argv, env, controller)]


@patch("rdsconnect.handoff.launcher.start_and_wait", return_value=0)
def test_run_external_announces_client_on_stdout(
    mock_start: MagicMock,
    metabase_instance: InstanceRecord,
    credentials: Credentials,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.INFO, logger="rdsconnect.handoff.launcher"):
        run_external(
            "/usr/bin/pgcli", metabase_instance, credentials, "postgres", RecordingController()
        )

    record = next(r for r in caplog.records if r.getMessage() == "Launching pgcli...")
    assert record.stream == "stdout"
