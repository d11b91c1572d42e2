from pydantic import BaseModel, Field, field_validator
from typing import Literal


class MdsServerConfig(BaseModel):
    url: str = Field(default="http://localhost:8090", pattern=r"^https?://[^/\s]+")
    user: str | None = None
    # name of the env var holding the password, never the password itself
    password_env: str = Field(default="MDS_PASSWORD", pattern=r"^[A-Za-z_][A-Za-z0-9_]*$")
    # None waits forever; set a number of seconds to bound every call
    timeout: float | None = Field(default=None, gt=0)

    @field_validator("user")
    @classmethod
    def _blank_user_is_unset(cls, v: str | None) -> str | None:
        # an unset ${MDS_USER} expands to ""
        return v or None


class ClusterIdsConfig(BaseModel):
    kafka: str | None = None
    connect: str | None = None
    schema_registry: str | None = None
    ksql: str | None = None


class MdsConfig(BaseModel):
    mds: MdsServerConfig = Field(default_factory=MdsServerConfig)
    clusters: ClusterIdsConfig = Field(default_factory=ClusterIdsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
