"""Cluster-API machine definitions."""

from cluster_installer.machines.assets import (
    CLUSTER_API_NAMESPACE,
    ClusterK8sIO,
    Master,
    Worker,
    ignition_pointer,
    provider_config,
)

__all__ = [
    "CLUSTER_API_NAMESPACE",
    "ClusterK8sIO",
    "Master",
    "Worker",
    "ignition_pointer",
    "provider_config",
]
