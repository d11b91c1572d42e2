"""Read-only reverse lookups against the metadata service.

Results feed reconciliation, so a failed lookup is logged and reported as an
empty list. Callers must read an empty result as "unknown", not as "none".

Only transport and parse failures are downgraded. Calling before
``login()`` raises AuthenticationError, and a cluster id missing from the
registry raises ClusterScopeError; both are setup mistakes, not answers.
"""

from __future__ import annotations

import json
import logging
from typing import Literal

from pydantic import TypeAdapter, ValidationError

from mdsrbac.api.errors import LookupFailure, TransportError
from mdsrbac.api.gateway import ApiGateway, path_segment
from mdsrbac.roles.models import RbacResource
from mdsrbac.scope.clusters import ClusterRegistry, ClusterScope

logger = logging.getLogger(__name__)

Component = Literal["kafka", "connect", "schema-registry"]

_STRINGS = TypeAdapter(list[str])
_RESOURCES = TypeAdapter(list[RbacResource])

_LOOKUP_ERRORS = (TransportError, json.JSONDecodeError, ValidationError)


class LookupService:
    """principals-by-role, roles-by-principal and resources-by-role queries."""

    def __init__(self, gateway: ApiGateway, registry: ClusterRegistry) -> None:
        self.gateway = gateway
        self.registry = registry

    def scope_for(self, component: Component) -> ClusterScope:
        if component == "kafka":
            return self.registry.for_kafka()
        if component == "connect":
            return self.registry.for_connect()
        if component == "schema-registry":
            return self.registry.for_schema_registry()
        raise ValueError(
            f"Unknown component {component!r} (valid: kafka, connect, schema-registry)"
        )

    def _post(self, operation: str, path: str, scope: ClusterScope, adapter: TypeAdapter) -> list:
        body = json.dumps(scope.as_map())
        try:
            response = self.gateway.post(path, body)
            if not response.strip():
                return []
            return adapter.validate_json(response)
        except _LOOKUP_ERRORS as e:
            logger.warning("%s", LookupFailure(operation, e))
            return []

    def principals_by_role(
        self, role: str, component: Component = "kafka", scope: ClusterScope | None = None
    ) -> list[str]:
        """Principals holding ``role`` at the component's cluster scope."""
        if scope is None:
            scope = self.scope_for(component)
        return self._post(
            "principals_by_role", f"lookup/role/{path_segment(role)}", scope, _STRINGS
        )

    def roles_by_principal(
        self, principal: str, component: Component = "kafka", scope: ClusterScope | None = None
    ) -> list[str]:
        if scope is None:
            scope = self.scope_for(component)
        return self._post(
            "roles_by_principal",
            f"lookup/principals/{path_segment(principal)}/roleNames",
            scope,
            _STRINGS,
        )

    def resources_by_role(
        self,
        principal: str,
        role: str,
        component: Component = "kafka",
        scope: ClusterScope | None = None,
    ) -> list[RbacResource]:
        if scope is None:
            scope = self.scope_for(component)
        return self._post(
            "resources_by_role",
            f"principals/{path_segment(principal)}/roles/{path_segment(role)}/resources",
            scope,
            _RESOURCES,
        )

    def role_names(self) -> list[str]:
        """Every role name the service knows about."""
        try:
            response = self.gateway.get("roleNames", ok=(200, 204))
            if not response.strip():
                return []
            return _STRINGS.validate_json(response)
        except _LOOKUP_ERRORS as e:
            logger.warning("%s", LookupFailure("role_names", e))
            return []
