"""Request scopes: a cluster scope plus the resource patterns a binding targets."""

from __future__ import annotations

import json
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from mdsrbac.api.errors import ScopeError
from mdsrbac.scope.clusters import ClusterScope


class PatternType(str, Enum):
    LITERAL = "LITERAL"
    PREFIXED = "PREFIXED"

    @classmethod
    def parse(cls, value: str | PatternType) -> PatternType:
        if isinstance(value, PatternType):
            return value
        try:
            return cls(value.upper())
        except ValueError:
            raise ScopeError(
                f"Unknown pattern type {value!r} (valid: LITERAL, PREFIXED)"
            ) from None


class ResourcePattern(BaseModel):
    """One addressable resource, e.g. a topic or a schema subject."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    resource_type: str = Field(alias="resourceType")
    name: str
    pattern_type: PatternType = Field(default=PatternType.LITERAL, alias="patternType")

    def as_wire(self) -> dict[str, str]:
        return {
            "resourceType": self.resource_type,
            "name": self.name,
            "patternType": self.pattern_type.value,
        }


class RequestScope(BaseModel):
    """Clusters plus an ordered list of resource patterns.

    Build steps return new instances. ``build()`` finalizes the scope; only a
    finalized scope can be serialized, and a finalized scope takes no more
    resources.
    """

    model_config = ConfigDict(frozen=True)

    cluster_entries: tuple[tuple[str, str], ...] = ()
    resources: tuple[ResourcePattern, ...] = ()
    finalized: bool = False

    @property
    def clusters(self) -> dict[str, str]:
        """A fresh copy of the label -> id map; editing it never touches the scope."""
        return dict(self.cluster_entries)

    def _check_open(self) -> None:
        if self.finalized:
            raise ScopeError("RequestScope is already built")

    def with_clusters(self, clusters: ClusterScope | dict) -> RequestScope:
        self._check_open()
        if isinstance(clusters, ClusterScope):
            mapping = clusters.entries
        else:
            # accept both {"clusters": {...}} and a bare label -> id map
            mapping = dict(clusters.get("clusters", clusters)).items()
        return self.model_copy(update={"cluster_entries": tuple(mapping)})

    def add_resource(
        self,
        resource_type: str,
        name: str,
        pattern_type: str | PatternType = PatternType.LITERAL,
    ) -> RequestScope:
        self._check_open()
        pattern = ResourcePattern(
            resource_type=resource_type,
            name=name,
            pattern_type=PatternType.parse(pattern_type),
        )
        return self.model_copy(update={"resources": self.resources + (pattern,)})

    def build(self) -> RequestScope:
        self._check_open()
        return self.model_copy(update={"finalized": True})

    @property
    def has_resources(self) -> bool:
        return bool(self.resources)

    def get_resource(self, index: int) -> ResourcePattern:
        try:
            return self.resources[index]
        except IndexError:
            raise ScopeError(
                f"RequestScope has {len(self.resources)} resource(s), no index {index}"
            ) from None

    def _check_built(self) -> None:
        if not self.finalized:
            raise ScopeError("RequestScope must be built before it is serialized")

    def as_dict(self) -> dict:
        self._check_built()
        return {
            "scope": {"clusters": self.clusters},
            "resourcePatterns": [r.as_wire() for r in self.resources],
        }

    def clusters_as_dict(self) -> dict:
        self._check_built()
        return {"clusters": self.clusters}

    def as_json(self) -> str:
        """Full form: cluster map and resource patterns."""
        return json.dumps(self.as_dict())

    def clusters_as_json(self) -> str:
        """Clusters-only form, used for cluster-wide grants and every delete."""
        return json.dumps(self.clusters_as_dict())
