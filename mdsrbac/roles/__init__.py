from .builder import ClusterLevelRoleBuilder
from .lookup import LookupService
from .models import BindingDescriptor, RbacResource, ResourceType, RoleBindingRequest
from .resolver import BindingResolver

__all__ = [
    "BindingDescriptor",
    "BindingResolver",
    "ClusterLevelRoleBuilder",
    "LookupService",
    "RbacResource",
    "ResourceType",
    "RoleBindingRequest",
]
