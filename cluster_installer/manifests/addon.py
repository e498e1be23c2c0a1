"""kube-addon operator configuration."""

from __future__ import annotations

import secrets
from typing import List

import yaml

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.installconfig.asset import InstallConfig
from cluster_installer.installconfig.models import (
    PLATFORM_LIBVIRT,
    InstallConfigSpec,
)

ADDON_CONFIG_FILENAME = "kube-addon-operator-config.yml"
ADDON_API_VERSION = "v1"
ADDON_KIND = "KubeAddonOperatorConfig"


def api_server_url(config: InstallConfigSpec) -> str:
    return f"https://{config.metadata.name}-api.{config.base_domain}:6443"


def cloud_provider(config: InstallConfigSpec) -> str:
    """Return the Kubernetes cloud provider name; libvirt has none."""
    name = config.platform.name()
    return "" if name == PLATFORM_LIBVIRT else name


class KubeAddonOperator(Asset):
    """Generates the config consumed by the kube-addon operator.

    The registry HTTP secret is random, so this asset is only kept in
    memory and embedded in the cluster config map.
    """

    name = "Kube Addon Operator"

    def __init__(self) -> None:
        self.file_list: List[Artifact] = []

    def dependencies(self) -> List[Asset]:
        return [InstallConfig()]

    def generate(self, parents: Parents) -> None:
        config = parents[InstallConfig].config
        operator_config = {
            "apiVersion": ADDON_API_VERSION,
            "kind": ADDON_KIND,
            "CloudProvider": cloud_provider(config),
            "ClusterConfig": {"APIServerURL": api_server_url(config)},
            "RegistryHTTPSecret": secrets.token_hex(8),
        }
        data = yaml.safe_dump(operator_config, sort_keys=False)
        self.file_list = [
            Artifact(filename=ADDON_CONFIG_FILENAME, data=data.encode("utf-8"))
        ]

    def files(self) -> List[Artifact]:
        return self.file_list
