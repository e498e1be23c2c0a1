"""Cluster-API machine definitions derived from the install config.

These assets only live in memory: they are regenerated on each run and
reach disk through the tectonic manifests.
"""

from __future__ import annotations

import base64
import json
from typing import Any, Dict, List

import yaml

from cluster_installer.asset.base import Asset, Parents
from cluster_installer.installconfig.asset import InstallConfig
from cluster_installer.installconfig.models import (
    AWSPlatform,
    InstallConfigSpec,
    LibvirtPlatform,
    OpenStackPlatform,
)

CLUSTER_API_NAMESPACE = "openshift-cluster-api"
CLUSTER_API_VERSION = "cluster.k8s.io/v1alpha1"
IGNITION_VERSION = "2.2.0"


def _dump(obj: Dict[str, Any]) -> bytes:
    return yaml.safe_dump(obj, sort_keys=False).encode("utf-8")


def _object_list(items: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"apiVersion": "v1", "kind": "List", "items": items}


def provider_config(config: InstallConfigSpec, role: str) -> Dict[str, Any]:
    """Return the platform-specific machine provider config for *role*."""
    platform = config.platform.selected()
    if isinstance(platform, AWSPlatform):
        value: Dict[str, Any] = {
            "apiVersion": "awsproviderconfig/v1alpha1",
            "kind": "AWSMachineProviderConfig",
            "placement": {"region": platform.region},
            "tags": [
                {"name": "tectonicClusterID", "value": config.cluster_id},
                {"name": f"kubernetes.io/cluster/{config.metadata.name}", "value": "owned"},
            ],
        }
    elif isinstance(platform, OpenStackPlatform):
        value = {
            "apiVersion": "openstackproviderconfig/v1alpha1",
            "kind": "OpenstackProviderSpec",
            "region": platform.region,
            "cloudName": platform.cloud,
        }
    elif isinstance(platform, LibvirtPlatform):
        value = {
            "apiVersion": "libvirtproviderconfig/v1alpha1",
            "kind": "LibvirtMachineProviderConfig",
            "uri": platform.uri,
            "networkInterfaceName": platform.network_if_name,
        }
    else:
        value = {}
    value["userDataSecret"] = f"{role}-user-data"
    return {"value": value}


def ignition_pointer(config: InstallConfigSpec, role: str) -> bytes:
    """Return an Ignition config that appends the *role* config served by the cluster."""
    source = (
        f"https://{config.metadata.name}-api.{config.base_domain}:49500/config/{role}"
    )
    pointer = {
        "ignition": {
            "version": IGNITION_VERSION,
            "config": {"append": [{"source": source}]},
        }
    }
    return json.dumps(pointer, sort_keys=True).encode("utf-8")


def user_data_secret(name: str, user_data: bytes) -> Dict[str, Any]:
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": name, "namespace": CLUSTER_API_NAMESPACE},
        "type": "Opaque",
        "data": {"userData": base64.b64encode(user_data).decode("ascii")},
    }


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


class ClusterK8sIO(Asset):
    """The cluster-api ``Cluster`` object."""

    name = "Cluster.cluster.k8s.io"

    def __init__(self) -> None:
        self.raw: bytes = b""

    def dependencies(self) -> List[Asset]:
        return [InstallConfig()]

    def generate(self, parents: Parents) -> None:
        config = parents[InstallConfig].config
        self.raw = _dump(
            {
                "apiVersion": CLUSTER_API_VERSION,
                "kind": "Cluster",
                "metadata": {
                    "name": config.metadata.name,
                    "namespace": CLUSTER_API_NAMESPACE,
                },
                "spec": {
                    "clusterNetwork": {
                        "services": {"cidrBlocks": ["10.3.0.0/16"]},
                        "pods": {"cidrBlocks": ["10.2.0.0/16"]},
                        "serviceDomain": "unused",
                    }
                },
            }
        )


class Master(Asset):
    """One ``Machine`` per master replica plus their user-data secrets."""

    name = "Master Machines"

    def __init__(self) -> None:
        self.machines_raw: bytes = b""
        self.user_data_secrets_raw: bytes = b""

    def dependencies(self) -> List[Asset]:
        return [InstallConfig()]

    def generate(self, parents: Parents) -> None:
        config = parents[InstallConfig].config
        cluster = config.metadata.name
        machines: List[Dict[str, Any]] = []
        secrets: List[Dict[str, Any]] = []
        for index in range(config.master_count):
            machines.append(
                {
                    "apiVersion": CLUSTER_API_VERSION,
                    "kind": "Machine",
                    "metadata": {
                        "name": f"{cluster}-master-{index}",
                        "namespace": CLUSTER_API_NAMESPACE,
                        "labels": {
                            "sigs.k8s.io/cluster-api-cluster": cluster,
                            "sigs.k8s.io/cluster-api-machine-role": "master",
                            "sigs.k8s.io/cluster-api-machine-type": "master",
                        },
                    },
                    "spec": {"providerConfig": provider_config(config, "master")},
                }
            )
            secrets.append(
                user_data_secret(
                    f"master-user-data-{index}", ignition_pointer(config, "master")
                )
            )
        self.machines_raw = _dump(_object_list(machines))
        self.user_data_secrets_raw = _dump(_object_list(secrets))


class Worker(Asset):
    """The worker ``MachineSet`` and its user-data secret."""

    name = "Worker Machines"

    def __init__(self) -> None:
        self.machine_set_raw: bytes = b""
        self.user_data_secret_raw: bytes = b""

    def dependencies(self) -> List[Asset]:
        return [InstallConfig()]

    def generate(self, parents: Parents) -> None:
        config = parents[InstallConfig].config
        cluster = config.metadata.name
        labels = {
            "sigs.k8s.io/cluster-api-cluster": cluster,
            "sigs.k8s.io/cluster-api-machine-role": "worker",
            "sigs.k8s.io/cluster-api-machine-type": "worker",
        }
        self.machine_set_raw = _dump(
            {
                "apiVersion": CLUSTER_API_VERSION,
                "kind": "MachineSet",
                "metadata": {
                    "name": f"{cluster}-worker-0",
                    "namespace": CLUSTER_API_NAMESPACE,
                    "labels": labels,
                },
                "spec": {
                    "replicas": config.worker_count,
                    "selector": {"matchLabels": dict(labels)},
                    "template": {
                        "metadata": {"labels": dict(labels)},
                        "spec": {"providerConfig": provider_config(config, "worker")},
                    },
                },
            }
        )
        self.user_data_secret_raw = _dump(
            user_data_secret("worker-user-data", ignition_pointer(config, "worker"))
        )
