"""YAML config loading with env var expansion."""

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import MdsConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDSRBAC_CONFIG"

# Only these variables may be referenced as ${VAR} inside a config file.
_ALLOWED_ENV_VARS = frozenset({
    "MDS_URL",
    "MDS_USER",
    "KAFKA_CLUSTER_ID",
    "CONNECT_CLUSTER_ID",
    "SCHEMA_REGISTRY_CLUSTER_ID",
    "KSQL_CLUSTER_ID",
})


def _candidate_paths(cli_path: str | None) -> list[Path]:
    """CLI flag > $MDSRBAC_CONFIG > ./mdsrbac.yaml > ~/.mdsrbac/config.yaml."""
    explicit = cli_path or os.environ.get(CONFIG_ENV_VAR)
    paths = [Path(explicit)] if explicit else []
    if explicit and not paths[0].exists():
        raise ValueError(f"Config file not found: {explicit}")
    paths.append(Path("./mdsrbac.yaml"))
    paths.append(Path.home() / ".mdsrbac" / "config.yaml")
    return paths


def _parse(path: Path) -> MdsConfig | None:
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping at top level")
    try:
        return MdsConfig(**_expand_env_vars(raw))
    except ValidationError as e:
        raise ValueError(f"Invalid config in {path}: {e}") from e


def _check_credentials(config: MdsConfig, source: Path | None) -> None:
    server = config.mds
    if server.user and server.password_env not in os.environ:
        logger.warning(
            "MDS user %r configured in %s but %s is not set; requests will not be authorized",
            server.user,
            source or "defaults",
            server.password_env,
        )


def load_config(cli_path: str | None = None) -> MdsConfig:
    """Load the first non-empty config file, or defaults when there is none.

    An explicit path (flag or $MDSRBAC_CONFIG) that does not exist is an
    error; the project and user files are optional.
    """
    for path in _candidate_paths(cli_path):
        if not path.exists():
            continue
        config = _parse(path)
        if config is not None:
            _check_credentials(config, path)
            return config

    return MdsConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings.

    Variables outside the allow-list are left untouched.
    """
    if isinstance(obj, str):
        def _sub(m: re.Match) -> str:
            name = m.group(1)
            if name not in _ALLOWED_ENV_VARS:
                return m.group(0)
            return os.environ.get(name, "")

        return re.sub(r"\$\{(\w+)\}", _sub, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `mdsrbac config init`
DEFAULT_CONFIG_TEMPLATE = """\
# mdsrbac.yaml

# Metadata service
mds:
  url: "http://localhost:8090"
  user: "${MDS_USER}"
  password_env: "MDS_PASSWORD"   # the password itself is never stored here
  # timeout: 30                  # seconds; omit to wait indefinitely

# Cluster ids used to scope bindings and lookups
clusters:
  kafka: "${KAFKA_CLUSTER_ID}"
  # connect: "${CONNECT_CLUSTER_ID}"
  # schema_registry: "${SCHEMA_REGISTRY_CLUSTER_ID}"
  # ksql: "${KSQL_CLUSTER_ID}"

# Logging
log_level: "info"                # debug | info | warn | error
"""
