"""Tests for the RdsConnect command surface."""

from pathlib import Path
from unittest.mock import MagicMock

import fire
import pytest

from rdsconnect import __version__
from rdsconnect.__main__ import RdsConnect
from rdsconnect.exceptions import ProviderAPIError


@pytest.fixture
def session_factory() -> MagicMock:
    factory = MagicMock()
    factory.return_value.region_name = "ap-south-1"
    return factory


def test_connect_builds_config_and_runs(
    session_factory: MagicMock, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("RDS_CACHE_DIR", str(tmp_path))
    runner = MagicMock()
    runner.run.return_value = 0
    runner_factory = MagicMock(return_value=runner)
    rds = RdsConnect(session_factory=session_factory, runner_factory=runner_factory)

    assert rds.connect(name="metabase", profile="ackodev", region="ap-southeast-1") == 0

    config, session = runner_factory.call_args.args
    assert config.profile == "ackodev"
    assert config.region == "ap-southeast-1"
    assert config.home_region == "ap-south-1"
    assert config.cache_dir == tmp_path
    assert session is session_factory.return_value
    session_factory.assert_called_with(profile_name="ackodev", region_name="ap-southeast-1")
    runner.run.assert_called_once_with(name="metabase", last=False)


def test_connect_stringifies_numeric_names(session_factory: MagicMock) -> None:
    runner = MagicMock()
    rds = RdsConnect(session_factory=session_factory, runner_factory=MagicMock(return_value=runner))

    rds.connect(name=2024)

    runner.run.assert_called_once_with(name="2024", last=False)


def test_complete_prints_candidates(
    session_factory: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    runner = MagicMock()
    runner.complete.return_value = ["db1\tdb.t3.micro", "db2\tdb.r6g.large"]
    rds = RdsConnect(session_factory=session_factory, runner_factory=MagicMock(return_value=runner))

    rds.complete("db")

    assert capsys.readouterr().out == "db1\tdb.t3.micro\ndb2\tdb.r6g.large\n"
    runner.complete.assert_called_once_with("db")


def test_complete_is_silent_on_errors(
    session_factory: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    runner = MagicMock()
    runner.complete.side_effect = ProviderAPIError("denied", error_code="AccessDenied")
    rds = RdsConnect(session_factory=session_factory, runner_factory=MagicMock(return_value=runner))

    rds.complete()

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_profiles_lists_shared_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    credentials_file = tmp_path / "credentials"
    credentials_file.write_text("[default]\n[ackodev]\n[ackoprod]\n")
    config_file = tmp_path / "config"
    config_file.write_text("[profile ackolife]\nregion = ap-south-1\n[sso-session corp]\n")
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(credentials_file))
    monkeypatch.setenv("AWS_CONFIG_FILE", str(config_file))

    RdsConnect().profiles("acko")

    assert capsys.readouterr().out.splitlines() == ["ackodev", "ackolife", "ackoprod"]


def test_version_output(capsys: pytest.CaptureFixture[str]) -> None:
    RdsConnect().version()

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == f"rds version:    {__version__}"
    assert lines[1].startswith("python version: ")
    assert lines[2].startswith("os/arch:        ")


@pytest.mark.parametrize("fragment", ["1_000", "True", "2024", "1e3"])
def test_command_line_name_reaches_resolver_verbatim(
    fragment: str, session_factory: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    runner = MagicMock()
    runner.run.return_value = 0
    rds = RdsConnect(session_factory=session_factory, runner_factory=MagicMock(return_value=runner))

    fire.Fire(rds, command=["connect", fragment], name="rds")

    runner.run.assert_called_once_with(name=fragment, last=False)


def test_command_line_profile_and_prefix_stay_strings(
    session_factory: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    runner = MagicMock()
    runner.complete.return_value = []
    runner_factory = MagicMock(return_value=runner)
    rds = RdsConnect(session_factory=session_factory, runner_factory=runner_factory)

    fire.Fire(rds, command=["complete", "1_0", "--profile", "123"], name="rds")

    runner.complete.assert_called_once_with("1_0")
    config, _ = runner_factory.call_args.args
    assert config.profile == "123"
