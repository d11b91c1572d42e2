"""Tests for the mdsrbac CLI."""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from mdsrbac.cli import app
from mdsrbac.client import MdsApiClient

runner = CliRunner()

CONFIG = """\
mds:
  url: http://mds.example:8090
  user: admin
clusters:
  kafka: kafka-1
  connect: connect-1
  schema_registry: sr-1
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "mdsrbac.yaml"
    path.write_text(CONFIG)
    return str(path)


@pytest.fixture
def patched_client(transport):
    """Route every CLI-built client through the fake MDS transport."""
    original = MdsApiClient.from_config.__func__

    def _from_config(cls, config, transport_=None):
        return original(cls, config, transport=transport)

    with patch.dict(os.environ, {"MDS_PASSWORD": "secret"}):
        with patch.object(MdsApiClient, "from_config", classmethod(_from_config)):
            yield


def test_bind_dry_run_prints_request(config_file, patched_client, fake_mds):
    result = runner.invoke(
        app, ["-c", config_file, "bind", "User:alice", "DeveloperRead", "orders", "--dry-run"]
    )
    assert result.exit_code == 0, result.output
    assert "principals/User:alice/roles/DeveloperRead/bindings" in result.output
    assert fake_mds.requests == []


def test_bind_sends_request(config_file, patched_client, fake_mds):
    result = runner.invoke(
        app, ["-c", config_file, "bind", "User:alice", "DeveloperRead", "orders", "-p", "PREFIXED"]
    )
    assert result.exit_code == 0, result.output
    body = fake_mds.last_json()
    assert body["resourcePatterns"][0]["patternType"] == "PREFIXED"


def test_bind_failure_exits_1(config_file, patched_client, fake_mds):
    fake_mds.reply(403, text="forbidden")
    result = runner.invoke(app, ["-c", config_file, "bind", "User:alice", "DeveloperRead", "orders"])
    assert result.exit_code == 1
    assert "403" in result.output


def test_bind_cluster_connect(config_file, patched_client, fake_mds):
    result = runner.invoke(
        app, ["-c", config_file, "bind-cluster", "User:c", "SystemAdmin", "--component", "connect"]
    )
    assert result.exit_code == 0, result.output
    assert fake_mds.last.url.path == "/security/1.0/principals/User:c/roles/SystemAdmin"
    assert json.loads(fake_mds.last.content) == {
        "clusters": {"kafka-cluster": "kafka-1", "connect-cluster": "connect-1"}
    }


def test_bind_cluster_unknown_component(config_file, patched_client):
    result = runner.invoke(
        app, ["-c", config_file, "bind-cluster", "User:c", "SystemAdmin", "--component", "zk"]
    )
    assert result.exit_code == 1


def test_bind_cluster_missing_ksql_id(config_file, patched_client):
    result = runner.invoke(
        app, ["-c", config_file, "bind-cluster", "User:c", "SystemAdmin", "--component", "ksql"]
    )
    assert result.exit_code == 1
    assert "ksql-cluster" in result.output


def test_unbind(config_file, patched_client, fake_mds):
    result = runner.invoke(app, ["-c", config_file, "unbind", "User:c", "SystemAdmin"])
    assert result.exit_code == 0, result.output
    assert fake_mds.last.method == "DELETE"


def test_unbind_failure_exits_1(config_file, patched_client, fake_mds):
    fake_mds.reply(500, text="boom")
    result = runner.invoke(app, ["-c", config_file, "unbind", "User:c", "SystemAdmin"])
    assert result.exit_code == 1


def test_auth(config_file, patched_client, fake_mds):
    fake_mds.reply(200, {"auth_token": "t", "token_type": "bearer", "expires_in": 300})
    result = runner.invoke(app, ["-c", config_file, "auth"])
    assert result.exit_code == 0, result.output
    assert "bearer" in result.output


def test_auth_failure(config_file, patched_client, fake_mds):
    fake_mds.reply(401, text="no")
    result = runner.invoke(app, ["-c", config_file, "auth"])
    assert result.exit_code == 1


def test_lookup_principals(config_file, patched_client, fake_mds):
    fake_mds.reply(200, ["User:alice"])
    result = runner.invoke(app, ["-c", config_file, "lookup", "principals", "DeveloperRead"])
    assert result.exit_code == 0, result.output
    assert "User:alice" in result.output


def test_lookup_empty_is_flagged_inconclusive(config_file, patched_client, fake_mds):
    fake_mds.reply(500, text="boom")
    result = runner.invoke(app, ["-c", config_file, "lookup", "roles", "User:alice"])
    assert result.exit_code == 0
    assert "lookup failed" in result.output


def test_roles(config_file, patched_client, fake_mds):
    fake_mds.reply(200, ["DeveloperRead"])
    result = runner.invoke(app, ["-c", config_file, "roles"])
    assert result.exit_code == 0
    assert "DeveloperRead" in result.output


def test_config_init_and_show(tmp_path):
    target = tmp_path / "new.yaml"
    result = runner.invoke(app, ["config", "init", "--path", str(target)])
    assert result.exit_code == 0, result.output
    assert target.exists()

    again = runner.invoke(app, ["config", "init", "--path", str(target)])
    assert again.exit_code == 1

    shown = runner.invoke(app, ["-c", str(target), "config", "show"])
    assert shown.exit_code == 0
    assert "password_env" in shown.output


def test_invalid_config_exits(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("log_level: loud\n")
    result = runner.invoke(app, ["-c", str(bad), "roles"])
    assert result.exit_code == 1
