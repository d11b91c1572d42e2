from .loader import load_config
from .models import ClusterIdsConfig, MdsConfig, MdsServerConfig

__all__ = [
    "ClusterIdsConfig",
    "MdsConfig",
    "MdsServerConfig",
    "load_config",
]
