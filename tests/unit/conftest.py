"""Pytest configuration and fixtures for rdsconnect unit tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

from rdsconnect.cache import CacheStore
from rdsconnect.models import ConnectConfig, Credentials, InstanceRecord


@pytest.fixture(autouse=True)
def isolate_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's cache, config and Pritunl install."""
    monkeypatch.delenv("RDS_CACHE_DIR", raising=False)
    monkeypatch.delenv("RDS_DEBUG", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.setenv("RDS_CONFIG", str(tmp_path / "absent-config.yaml"))
    monkeypatch.setenv("RDS_PRITUNL_CLIENT", str(tmp_path / "absent-pritunl"))


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Sets mock AWS credentials in environment variables for the duration of the test,
    then restores the original environment state.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    names = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    old_values = {name: os.environ.get(name) for name in names}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "ap-south-1"

    yield

    for name, value in old_values.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def cache(cache_dir: Path) -> CacheStore:
    return CacheStore(cache_dir)


@pytest.fixture
def metabase_instance() -> InstanceRecord:
    return InstanceRecord(
        id="metabasedev-poc",
        host="metabasedev-poc.xxxxx.ap-south-1.rds.amazonaws.com",
        port=5432,
        size="db.t3.micro",
        version="15",
    )


@pytest.fixture
def staging_instance() -> InstanceRecord:
    return InstanceRecord(
        id="staging-db-1",
        host="staging.xxx.rds.amazonaws.com",
        port=5432,
        size="db.r6g.large",
        version="14.9",
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(username="postgres", password="test-secret")


@pytest.fixture
def connect_config(cache_dir: Path) -> ConnectConfig:
    return ConnectConfig(
        profile="testprofile",
        region="ap-south-1",
        home_region="ap-south-1",
        cache_dir=cache_dir,
        vpn_check=False,
    )
