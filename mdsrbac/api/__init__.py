from .errors import (
    AuthenticationError,
    ClusterScopeError,
    LookupFailure,
    MdsError,
    ScopeError,
    TransportError,
)
from .gateway import ApiGateway
from .session import AuthSession, AuthToken

__all__ = [
    "ApiGateway",
    "AuthSession",
    "AuthToken",
    "AuthenticationError",
    "ClusterScopeError",
    "LookupFailure",
    "MdsError",
    "ScopeError",
    "TransportError",
]
