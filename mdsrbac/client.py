"""Client facade for one metadata service."""

from __future__ import annotations

import logging
import os

import httpx

from mdsrbac.api.gateway import ApiGateway
from mdsrbac.api.session import AuthSession, AuthToken
from mdsrbac.config.models import MdsConfig
from mdsrbac.roles.builder import ClusterLevelRoleBuilder
from mdsrbac.roles.lookup import Component, LookupService
from mdsrbac.roles.models import BindingDescriptor, RbacResource
from mdsrbac.roles.resolver import BindingResolver
from mdsrbac.scope.clusters import ClusterRegistry, ClusterScope
from mdsrbac.scope.request import PatternType, RequestScope

logger = logging.getLogger(__name__)


class MdsApiClient:
    """Binds, unbinds and looks up RBAC roles on a metadata server.

    Holds the cluster id registry, the authenticated session and the gateway
    used by every call. Call ``login`` (and optionally ``authenticate``) once
    before sharing the client between threads.
    """

    def __init__(
        self,
        server: str,
        registry: ClusterRegistry | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.session = AuthSession()
        self.gateway = ApiGateway(server, self.session, timeout=timeout, transport=transport)
        self._registry = registry or ClusterRegistry()

    @classmethod
    def from_config(
        cls, config: MdsConfig, transport: httpx.BaseTransport | None = None
    ) -> MdsApiClient:
        """Build a client from config, logging in when a user is configured."""
        ids = config.clusters
        registry = ClusterRegistry(
            kafka_cluster_id=ids.kafka or None,
            connect_cluster_id=ids.connect or None,
            schema_registry_cluster_id=ids.schema_registry or None,
            ksql_cluster_id=ids.ksql or None,
        )
        client = cls(config.mds.url, registry, timeout=config.mds.timeout, transport=transport)
        if config.mds.user:
            password = os.environ.get(config.mds.password_env)
            if password is None:
                raise ValueError(
                    f"Missing MDS password: set environment variable {config.mds.password_env!r}"
                )
            client.login(config.mds.user, password)
        else:
            logger.warning("No MDS user configured; requests will fail until login() is called")
        return client

    # -- session ---------------------------------------------------------------

    def login(self, user: str, password: str) -> None:
        self.session.login(user, password)

    def authenticate(self) -> AuthToken:
        return self.session.authenticate(self.gateway)

    @property
    def credentials(self) -> AuthToken | None:
        return self.session.token

    # -- cluster ids -----------------------------------------------------------

    @property
    def registry(self) -> ClusterRegistry:
        return self._registry

    def set_kafka_cluster_id(self, cluster_id: str) -> None:
        self._registry = self._registry.with_kafka_cluster_id(cluster_id)

    def set_connect_cluster_id(self, cluster_id: str) -> None:
        self._registry = self._registry.with_connect_cluster_id(cluster_id)

    def set_schema_registry_cluster_id(self, cluster_id: str) -> None:
        self._registry = self._registry.with_schema_registry_cluster_id(cluster_id)

    def set_ksql_cluster_id(self, cluster_id: str) -> None:
        self._registry = self._registry.with_ksql_cluster_id(cluster_id)

    def with_cluster_ids(self) -> ClusterScope:
        """Empty scope over the current ids, for composing custom lookups."""
        return self._registry.detached()

    # The resolver and lookup service are rebuilt per call so they always see
    # the registry as it is now.

    @property
    def resolver(self) -> BindingResolver:
        return BindingResolver(self.gateway, self._registry)

    @property
    def lookups(self) -> LookupService:
        return LookupService(self.gateway, self._registry)

    # -- bindings --------------------------------------------------------------

    def bind(
        self,
        principal: str,
        role: str,
        resource: str,
        resource_type: str = "Topic",
        pattern_type: str | PatternType = PatternType.LITERAL,
    ) -> BindingDescriptor:
        return self.resolver.bind(principal, role, resource, resource_type, pattern_type)

    def bind_scope(self, principal: str, role: str, scope: RequestScope) -> BindingDescriptor:
        return self.resolver.bind_scope(principal, role, scope)

    def cluster_role(self, principal: str, role: str) -> ClusterLevelRoleBuilder:
        return self.resolver.cluster_role(principal, role)

    def bind_request(self, binding: BindingDescriptor) -> str:
        return self.resolver.create(binding)

    def delete_role(
        self, principal: str, role: str, scope: RequestScope, strict: bool = False
    ) -> bool:
        return self.resolver.delete(principal, role, scope, strict=strict)

    # -- lookups ---------------------------------------------------------------

    def lookup_principals_by_role(self, role: str, component: Component = "kafka") -> list[str]:
        return self.lookups.principals_by_role(role, component)

    def lookup_roles(self, principal: str, component: Component = "kafka") -> list[str]:
        return self.lookups.roles_by_principal(principal, component)

    def lookup_resources(
        self, principal: str, role: str, component: Component = "kafka"
    ) -> list[RbacResource]:
        return self.lookups.resources_by_role(principal, role, component)

    def role_names(self) -> list[str]:
        return self.lookups.role_names()
