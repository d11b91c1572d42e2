"""Pydantic models for role bindings and lookup results."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from mdsrbac.scope.request import PatternType, RequestScope

WILDCARD = "*"
CLUSTER_RESOURCE_NAME = "cluster"


class ResourceType(str, Enum):
    TOPIC = "Topic"
    GROUP = "Group"
    CLUSTER = "Cluster"
    TRANSACTIONAL_ID = "TransactionalId"
    SUBJECT = "Subject"
    CONNECTOR = "Connector"
    KSQL_CLUSTER = "KsqlCluster"
    UNKNOWN = "Unknown"

    @classmethod
    def _missing_(cls, value: object) -> ResourceType:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return cls.UNKNOWN


class BindingDescriptor(BaseModel):
    """A (principal, role, target) grant on its way to the wire.

    For resource-scoped bindings ``resource_name`` is the wildcard; the real
    target lives in the single resource pattern of ``scope``.
    """

    model_config = ConfigDict(frozen=True)

    principal: str
    role: str
    resource_type: ResourceType
    resource_name: str = WILDCARD
    pattern_type: PatternType = PatternType.LITERAL
    scope: RequestScope

    @property
    def is_cluster_level(self) -> bool:
        return self.resource_type == ResourceType.CLUSTER and not self.scope.resources


class RbacResource(BaseModel):
    """Resource descriptor returned by the resources-by-role lookup."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    resource_type: str = Field(alias="resourceType")
    name: str
    pattern_type: str = Field(default="LITERAL", alias="patternType")


class RoleBindingRequest(BaseModel):
    """The exact call a binding operation sends."""

    method: Literal["POST", "DELETE"]
    path: str
    body: str
