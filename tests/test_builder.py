"""Tests for ClusterLevelRoleBuilder."""

import pytest

from mdsrbac.api.errors import ClusterScopeError, ScopeError
from mdsrbac.roles.models import ResourceType
from mdsrbac.scope.clusters import ClusterRegistry
from mdsrbac.roles.resolver import BindingResolver


@pytest.fixture
def builder(resolver):
    return resolver.cluster_role("User:ops", "SystemAdmin")


def test_bare_cluster_scopes_are_disjoint_and_non_empty(builder):
    kafka = builder.for_kafka().scope
    connect = builder.for_connect().scope
    sr = builder.for_schema_registry().scope

    for scope in (kafka, connect, sr):
        assert scope.clusters
        assert scope.resources == ()
        assert scope.finalized

    assert kafka.clusters == {"kafka-cluster": "kafka-1"}
    assert connect.clusters == {"kafka-cluster": "kafka-1", "connect-cluster": "connect-1"}
    assert sr.clusters == {"kafka-cluster": "kafka-1", "schema-registry-cluster": "sr-1"}
    assert len({tuple(sorted(s.clusters.items())) for s in (kafka, connect, sr)}) == 3


def test_apply_produces_cluster_descriptor(builder):
    binding = builder.for_kafka().apply()
    assert binding.resource_type is ResourceType.CLUSTER
    assert binding.resource_name == "cluster"
    assert binding.is_cluster_level


def test_schema_subject_adds_one_resource(builder):
    scope = builder.for_schema_subject("orders-value", "PREFIXED").scope
    assert len(scope.resources) == 1
    assert scope.resources[0].resource_type == "Subject"
    assert scope.resources[0].pattern_type.value == "PREFIXED"
    assert "schema-registry-cluster" in scope.clusters


def test_connector_adds_one_resource(builder):
    scope = builder.for_connector("jdbc-sink").scope
    assert len(scope.resources) == 1
    assert scope.resources[0].resource_type == "Connector"
    assert scope.resources[0].name == "Connector:jdbc-sink"
    assert scope.clusters["connect-cluster"] == "connect-1"


def test_connector_cluster_override(builder, registry):
    scope = builder.for_connector("jdbc-sink", cluster_id="connect-other").scope
    assert scope.clusters["connect-cluster"] == "connect-other"
    assert registry.connect_cluster_id == "connect-1"


def test_connect_override(builder):
    scope = builder.for_connect("connect-other").scope
    assert scope.clusters["connect-cluster"] == "connect-other"
    assert scope.resources == ()


def test_control_center_is_resource_scoped(builder):
    binding = builder.for_control_center().apply()
    assert binding.resource_type is ResourceType.CLUSTER
    assert not binding.is_cluster_level
    assert binding.scope.resources[0].name == "control-center"
    assert binding.scope.clusters == {"kafka-cluster": "kafka-1"}


def test_narrowing_resets_instead_of_accumulating(builder):
    narrowed = builder.for_schema_subject("s").for_kafka()
    assert narrowed.scope.resources == ()
    assert narrowed.scope.clusters == {"kafka-cluster": "kafka-1"}


def test_narrowing_leaves_previous_builder_untouched(builder):
    subject = builder.for_schema_subject("s")
    subject.for_kafka()
    assert len(subject.scope.resources) == 1


def test_apply_without_narrowing_rejected(builder):
    with pytest.raises(ScopeError, match="no cluster scope"):
        builder.apply()


def test_missing_schema_registry_id(gateway):
    resolver = BindingResolver(gateway, ClusterRegistry(kafka_cluster_id="kafka-1"))
    with pytest.raises(ClusterScopeError):
        resolver.cluster_role("User:ops", "SystemAdmin").for_schema_registry()
