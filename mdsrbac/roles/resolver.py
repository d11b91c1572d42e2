"""Turns (principal, role, target) into role binding requests and submits them."""

from __future__ import annotations

import logging

from mdsrbac.api.errors import ScopeError, TransportError
from mdsrbac.api.gateway import ApiGateway, path_segment
from mdsrbac.roles.builder import ClusterLevelRoleBuilder
from mdsrbac.roles.models import (
    CLUSTER_RESOURCE_NAME,
    WILDCARD,
    BindingDescriptor,
    ResourceType,
    RoleBindingRequest,
)
from mdsrbac.scope.clusters import ClusterRegistry
from mdsrbac.scope.request import PatternType, RequestScope

logger = logging.getLogger(__name__)


def _role_path(principal: str, role: str) -> str:
    return f"principals/{path_segment(principal)}/roles/{path_segment(role)}"


class BindingResolver:
    """Composes binding descriptors and sends them to the metadata service."""

    def __init__(self, gateway: ApiGateway, registry: ClusterRegistry) -> None:
        self.gateway = gateway
        self.registry = registry

    # -- composition -----------------------------------------------------------

    def bind(
        self,
        principal: str,
        role: str,
        resource: str,
        resource_type: str = ResourceType.TOPIC.value,
        pattern_type: str | PatternType = PatternType.LITERAL,
    ) -> BindingDescriptor:
        """Resource-scoped binding on the core cluster."""
        scope = (
            RequestScope()
            .with_clusters(self.registry.for_kafka())
            .add_resource(resource_type, resource, pattern_type)
            .build()
        )
        return self.bind_scope(principal, role, scope)

    def bind_topic(
        self,
        principal: str,
        role: str,
        topic: str,
        pattern_type: str | PatternType = PatternType.LITERAL,
    ) -> BindingDescriptor:
        return self.bind(principal, role, topic, ResourceType.TOPIC.value, pattern_type)

    def bind_scope(self, principal: str, role: str, scope: RequestScope) -> BindingDescriptor:
        """Build a descriptor from a prepared scope.

        Only the first resource pattern describes the descriptor; any further
        patterns still travel in the scope body.
        """
        if not scope.finalized:
            raise ScopeError("RequestScope must be built before binding")
        first = scope.get_resource(0)
        return BindingDescriptor(
            principal=principal,
            role=role,
            resource_type=ResourceType(first.resource_type),
            resource_name=WILDCARD,
            pattern_type=first.pattern_type,
            scope=scope,
        )

    def bind_cluster_role(
        self,
        principal: str,
        role: str,
        scope: RequestScope,
        resource_type: ResourceType = ResourceType.CLUSTER,
        resource_name: str = CLUSTER_RESOURCE_NAME,
    ) -> BindingDescriptor:
        if not scope.finalized:
            raise ScopeError("RequestScope must be built before binding")
        if not scope.clusters:
            raise ScopeError(
                f"Cluster level binding of {role!r} for {principal!r} has no cluster scope; "
                "narrow it with for_kafka(), for_connect(), ... first"
            )
        return BindingDescriptor(
            principal=principal,
            role=role,
            resource_type=resource_type,
            resource_name=resource_name,
            pattern_type=PatternType.LITERAL,
            scope=scope,
        )

    def cluster_role(self, principal: str, role: str) -> ClusterLevelRoleBuilder:
        return ClusterLevelRoleBuilder(principal, role, self)

    # -- submission ------------------------------------------------------------

    def request_for(self, binding: BindingDescriptor) -> RoleBindingRequest:
        """Pick the wire shape for a binding.

        Cluster level means resource type CLUSTER with no resource patterns in
        the scope. A cluster-level builder narrowed to a subject or connector
        carries a pattern and is therefore sent as a resource binding.
        """
        path = _role_path(binding.principal, binding.role)
        if binding.is_cluster_level:
            return RoleBindingRequest(method="POST", path=path, body=binding.scope.clusters_as_json())
        return RoleBindingRequest(
            method="POST", path=f"{path}/bindings", body=binding.scope.as_json()
        )

    def create(self, binding: BindingDescriptor) -> str:
        """Submit a binding. Failures always propagate."""
        request = self.request_for(binding)
        logger.debug("bind.entity: %s", request.body)
        try:
            return self.gateway.post(request.path, request.body)
        except TransportError as e:
            logger.error(
                "Failed to bind role %s to %s: %s", binding.role, binding.principal, e
            )
            raise

    def delete_request(self, principal: str, role: str, scope: RequestScope) -> RoleBindingRequest:
        return RoleBindingRequest(
            method="DELETE", path=_role_path(principal, role), body=scope.clusters_as_json()
        )

    def delete(
        self, principal: str, role: str, scope: RequestScope, strict: bool = False
    ) -> bool:
        """Remove ``role`` from ``principal`` at the scope's clusters.

        Resource patterns in ``scope`` are not sent; the role membership at
        that cluster scope goes away entirely. A no-op on the server if the
        principal does not hold the role. With ``strict`` a failure raises
        TransportError, otherwise it is logged and False is returned.
        """
        request = self.delete_request(principal, role, scope)
        logger.debug("deleteRole: %s entity: %s", request.path, request.body)
        try:
            self.gateway.delete(request.path, request.body)
        except TransportError as e:
            logger.error("Failed to remove role %s from %s: %s", role, principal, e)
            if strict:
                raise
            return False
        return True

    def delete_binding(self, binding: BindingDescriptor, strict: bool = False) -> bool:
        return self.delete(binding.principal, binding.role, binding.scope, strict=strict)
