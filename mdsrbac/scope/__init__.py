from .clusters import (
    CLUSTER_LABELS,
    CONNECT_CLUSTER_ID_LABEL,
    KAFKA_CLUSTER_ID_LABEL,
    KSQL_CLUSTER_ID_LABEL,
    SCHEMA_REGISTRY_CLUSTER_ID_LABEL,
    ClusterRegistry,
    ClusterScope,
)
from .request import PatternType, RequestScope, ResourcePattern

__all__ = [
    "CLUSTER_LABELS",
    "CONNECT_CLUSTER_ID_LABEL",
    "KAFKA_CLUSTER_ID_LABEL",
    "KSQL_CLUSTER_ID_LABEL",
    "SCHEMA_REGISTRY_CLUSTER_ID_LABEL",
    "ClusterRegistry",
    "ClusterScope",
    "PatternType",
    "RequestScope",
    "ResourcePattern",
]
