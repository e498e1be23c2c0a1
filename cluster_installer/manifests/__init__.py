"""Kubernetes manifests rendered from upstream assets."""

from cluster_installer.manifests.addon import (
    ADDON_CONFIG_FILENAME,
    KubeAddonOperator,
)
from cluster_installer.manifests.tectonic import (
    KUBE_ADDON_OPERATOR_IMAGE,
    TECTONIC_CONFIG_PATH,
    TECTONIC_MANIFEST_DIR,
    ConfigurationObject,
    Tectonic,
    config_map,
)

__all__ = [
    "ADDON_CONFIG_FILENAME",
    "ConfigurationObject",
    "KUBE_ADDON_OPERATOR_IMAGE",
    "KubeAddonOperator",
    "TECTONIC_CONFIG_PATH",
    "TECTONIC_MANIFEST_DIR",
    "Tectonic",
    "config_map",
]
