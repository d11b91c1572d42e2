"""Tests for MdsApiClient wiring and config bootstrap."""

import os
from unittest.mock import patch

import pytest

from mdsrbac.client import MdsApiClient
from mdsrbac.config.models import ClusterIdsConfig, MdsConfig, MdsServerConfig


def test_set_cluster_ids_affect_later_bindings(client):
    client.set_kafka_cluster_id("kafka-2")
    binding = client.bind("User:a", "DeveloperRead", "orders")
    assert binding.scope.clusters == {"kafka-cluster": "kafka-2"}


def test_detached_scope_does_not_leak_into_registry(client):
    detached = client.with_cluster_ids().with_cluster("kafka-cluster", "rogue")
    assert detached.clusters == {"kafka-cluster": "rogue"}
    binding = client.bind("User:a", "DeveloperRead", "orders")
    assert binding.scope.clusters == {"kafka-cluster": "kafka-1"}


def test_authenticate_records_credentials(client, fake_mds):
    assert client.credentials is None
    fake_mds.reply(200, {"auth_token": "abc", "token_type": "Bearer", "expires_in": 3600})
    client.authenticate()
    assert client.credentials.value == "abc"


def test_other_setters(client):
    client.set_connect_cluster_id("c2")
    client.set_schema_registry_cluster_id("sr2")
    client.set_ksql_cluster_id("k2")
    assert client.registry.connect_cluster_id == "c2"
    assert client.registry.schema_registry_cluster_id == "sr2"
    assert client.registry.ksql_cluster_id == "k2"


def test_delete_role_delegates(client, fake_mds):
    scope = client.cluster_role("User:a", "SystemAdmin").for_schema_registry().scope
    assert client.delete_role("User:a", "SystemAdmin", scope) is True
    assert fake_mds.last_json() == {
        "clusters": {"kafka-cluster": "kafka-1", "schema-registry-cluster": "sr-1"}
    }


def test_lookup_delegates(client, fake_mds):
    fake_mds.reply(200, ["User:a"])
    assert client.lookup_principals_by_role("SystemAdmin", "schema-registry") == ["User:a"]


# -- from_config ---------------------------------------------------------------


def _config(user="svc"):
    return MdsConfig(
        mds=MdsServerConfig(url="http://mds:8090", user=user, timeout=15),
        clusters=ClusterIdsConfig(kafka="kafka-9", connect=""),
    )


@patch.dict(os.environ, {"MDS_PASSWORD": "pw"})
def test_from_config_logs_in(transport):
    client = MdsApiClient.from_config(_config(), transport=transport)
    assert client.session.is_logged_in
    assert client.gateway.timeout == 15
    assert client.registry.kafka_cluster_id == "kafka-9"
    assert client.registry.connect_cluster_id is None


@patch.dict(os.environ, {}, clear=True)
def test_from_config_requires_password():
    with pytest.raises(ValueError, match="MDS_PASSWORD"):
        MdsApiClient.from_config(_config())


def test_from_config_without_user():
    client = MdsApiClient.from_config(_config(user=None))
    assert not client.session.is_logged_in
