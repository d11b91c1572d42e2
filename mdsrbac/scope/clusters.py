"""Cluster id registry and the cluster scopes composed from it.

A scope names which physical clusters a binding or lookup applies to. Every
composition returns a new ``ClusterScope``; the registry itself is never
touched, so independent binding operations can compose different subsets at
the same time.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from mdsrbac.api.errors import ClusterScopeError

KAFKA_CLUSTER_ID_LABEL = "kafka-cluster"
CONNECT_CLUSTER_ID_LABEL = "connect-cluster"
SCHEMA_REGISTRY_CLUSTER_ID_LABEL = "schema-registry-cluster"
KSQL_CLUSTER_ID_LABEL = "ksql-cluster"

CLUSTER_LABELS = (
    KAFKA_CLUSTER_ID_LABEL,
    CONNECT_CLUSTER_ID_LABEL,
    SCHEMA_REGISTRY_CLUSTER_ID_LABEL,
    KSQL_CLUSTER_ID_LABEL,
)


class ClusterRegistry(BaseModel):
    """The authoritative cluster ids, loaded once at startup."""

    model_config = ConfigDict(frozen=True)

    kafka_cluster_id: str | None = None
    connect_cluster_id: str | None = None
    schema_registry_cluster_id: str | None = None
    ksql_cluster_id: str | None = None

    def with_kafka_cluster_id(self, cluster_id: str) -> ClusterRegistry:
        return self.model_copy(update={"kafka_cluster_id": cluster_id})

    def with_connect_cluster_id(self, cluster_id: str) -> ClusterRegistry:
        return self.model_copy(update={"connect_cluster_id": cluster_id})

    def with_schema_registry_cluster_id(self, cluster_id: str) -> ClusterRegistry:
        return self.model_copy(update={"schema_registry_cluster_id": cluster_id})

    def with_ksql_cluster_id(self, cluster_id: str) -> ClusterRegistry:
        return self.model_copy(update={"ksql_cluster_id": cluster_id})

    def detached(self) -> ClusterScope:
        """Return an empty scope seeded with these ids, ready for composition."""
        return ClusterScope(registry=self)

    # Shorthands for the three scopes every lookup variant needs.

    def for_kafka(self) -> ClusterScope:
        return self.detached().for_kafka()

    def for_connect(self, cluster_id: str | None = None) -> ClusterScope:
        return self.detached().for_connect(cluster_id)

    def for_schema_registry(self) -> ClusterScope:
        return self.detached().for_schema_registry()


class ClusterScope(BaseModel):
    """Immutable mapping of cluster label -> cluster id."""

    model_config = ConfigDict(frozen=True)

    registry: ClusterRegistry = Field(default_factory=ClusterRegistry, repr=False)
    entries: tuple[tuple[str, str], ...] = ()

    @property
    def clusters(self) -> dict[str, str]:
        return dict(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def with_cluster(self, label: str, cluster_id: str) -> ClusterScope:
        """Return a copy with ``label`` set to ``cluster_id`` (replacing any previous value)."""
        if label not in CLUSTER_LABELS:
            raise ClusterScopeError(
                f"Unknown cluster label {label!r} (valid: {', '.join(CLUSTER_LABELS)})"
            )
        if not cluster_id:
            raise ClusterScopeError(f"Empty cluster id for {label!r}")
        merged = dict(self.entries)
        merged[label] = cluster_id
        return self.model_copy(update={"entries": tuple(merged.items())})

    def _require(self, label: str, cluster_id: str | None) -> ClusterScope:
        if not cluster_id:
            raise ClusterScopeError(f"No cluster id configured for {label!r}")
        return self.with_cluster(label, cluster_id)

    def for_kafka(self) -> ClusterScope:
        return self._require(KAFKA_CLUSTER_ID_LABEL, self.registry.kafka_cluster_id)

    def for_connect(self, cluster_id: str | None = None) -> ClusterScope:
        """Add the Connect cluster; ``cluster_id`` overrides the configured id for this scope only."""
        connect_id = cluster_id or self.registry.connect_cluster_id
        return self.for_kafka()._require(CONNECT_CLUSTER_ID_LABEL, connect_id)

    def for_schema_registry(self) -> ClusterScope:
        return self.for_kafka()._require(
            SCHEMA_REGISTRY_CLUSTER_ID_LABEL, self.registry.schema_registry_cluster_id
        )

    def for_ksql(self) -> ClusterScope:
        return self.for_kafka()._require(KSQL_CLUSTER_ID_LABEL, self.registry.ksql_cluster_id)

    def as_map(self) -> dict[str, dict[str, str]]:
        """Wire shape used by every lookup and clusters-only request."""
        return {"clusters": self.clusters}
