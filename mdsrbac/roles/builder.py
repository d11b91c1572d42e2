"""Fluent builder for cluster-level role bindings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdsrbac.roles.models import CLUSTER_RESOURCE_NAME, BindingDescriptor, ResourceType
from mdsrbac.scope.clusters import ClusterScope
from mdsrbac.scope.request import PatternType, RequestScope

if TYPE_CHECKING:
    from mdsrbac.roles.resolver import BindingResolver

CONTROL_CENTER_RESOURCE = "control-center"


class ClusterLevelRoleBuilder:
    """Narrows a cluster-level grant to exactly one target.

    Every ``for_*`` call returns a new builder whose scope is composed from
    scratch, so narrowing twice keeps only the last target:

        resolver.cluster_role("User:ops", "SystemAdmin").for_connect().apply()
    """

    def __init__(
        self,
        principal: str,
        role: str,
        resolver: BindingResolver,
        scope: RequestScope | None = None,
    ) -> None:
        self.principal = principal
        self.role = role
        self._resolver = resolver
        self._scope = scope if scope is not None else RequestScope().build()

    @property
    def scope(self) -> RequestScope:
        return self._scope

    def _clusters(self) -> ClusterScope:
        return self._resolver.registry.detached()

    def _narrow(
        self,
        clusters: ClusterScope,
        resource: tuple[str, str, PatternType] | None = None,
    ) -> ClusterLevelRoleBuilder:
        scope = RequestScope().with_clusters(clusters)
        if resource is not None:
            scope = scope.add_resource(*resource)
        return ClusterLevelRoleBuilder(self.principal, self.role, self._resolver, scope.build())

    def for_kafka(self) -> ClusterLevelRoleBuilder:
        return self._narrow(self._clusters().for_kafka())

    def for_connect(self, cluster_id: str | None = None) -> ClusterLevelRoleBuilder:
        return self._narrow(self._clusters().for_connect(cluster_id))

    def for_schema_registry(self) -> ClusterLevelRoleBuilder:
        return self._narrow(self._clusters().for_schema_registry())

    def for_ksql(self) -> ClusterLevelRoleBuilder:
        return self._narrow(self._clusters().for_ksql())

    def for_schema_subject(
        self, subject: str, pattern_type: str | PatternType = PatternType.LITERAL
    ) -> ClusterLevelRoleBuilder:
        return self._narrow(
            self._clusters().for_schema_registry(),
            (ResourceType.SUBJECT.value, subject, PatternType.parse(pattern_type)),
        )

    def for_connector(
        self, connector: str, cluster_id: str | None = None
    ) -> ClusterLevelRoleBuilder:
        return self._narrow(
            self._clusters().for_connect(cluster_id),
            (ResourceType.CONNECTOR.value, f"Connector:{connector}", PatternType.LITERAL),
        )

    def for_control_center(self) -> ClusterLevelRoleBuilder:
        return self._narrow(
            self._clusters().for_kafka(),
            (ResourceType.CLUSTER.value, CONTROL_CENTER_RESOURCE, PatternType.LITERAL),
        )

    def apply(
        self,
        resource_type: ResourceType = ResourceType.CLUSTER,
        resource_name: str = CLUSTER_RESOURCE_NAME,
    ) -> BindingDescriptor:
        return self._resolver.bind_cluster_role(
            self.principal, self.role, self._scope, resource_type, resource_name
        )
