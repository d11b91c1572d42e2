"""mdsrbac - role binding client for the Confluent Metadata Service."""

from mdsrbac.api import (
    ApiGateway,
    AuthenticationError,
    AuthSession,
    AuthToken,
    ClusterScopeError,
    LookupFailure,
    MdsError,
    ScopeError,
    TransportError,
)
from mdsrbac.client import MdsApiClient
from mdsrbac.config import MdsConfig, load_config
from mdsrbac.roles import (
    BindingDescriptor,
    BindingResolver,
    ClusterLevelRoleBuilder,
    LookupService,
    RbacResource,
    ResourceType,
)
from mdsrbac.scope import ClusterRegistry, ClusterScope, PatternType, RequestScope, ResourcePattern

__version__ = "0.1.0"

__all__ = [
    "ApiGateway",
    "AuthSession",
    "AuthToken",
    "AuthenticationError",
    "BindingDescriptor",
    "BindingResolver",
    "ClusterLevelRoleBuilder",
    "ClusterRegistry",
    "ClusterScope",
    "ClusterScopeError",
    "LookupFailure",
    "LookupService",
    "MdsApiClient",
    "MdsConfig",
    "MdsError",
    "PatternType",
    "RbacResource",
    "RequestScope",
    "ResourcePattern",
    "ResourceType",
    "ScopeError",
    "TransportError",
    "load_config",
]
