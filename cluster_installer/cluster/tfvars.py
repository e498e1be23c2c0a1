"""Terraform variables asset (``terraform.tfvars``)."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.asset.errors import ConfigurationError
from cluster_installer.asset.fetcher import FileFetcher
from cluster_installer.installconfig.asset import InstallConfig
from cluster_installer.installconfig.models import (
    AWSPlatform,
    InstallConfigSpec,
    LibvirtPlatform,
    OpenStackPlatform,
)
from cluster_installer.terraform.runner import VARIABLES_FILE_NAME

logger = logging.getLogger(__name__)


def build_tfvars(config: InstallConfigSpec) -> Dict[str, Any]:
    """Return the Terraform variables for *config*."""
    tfvars: Dict[str, Any] = {
        "tectonic_cluster_id": config.cluster_id,
        "tectonic_cluster_name": config.metadata.name,
        "tectonic_base_domain": config.base_domain,
        "tectonic_master_count": config.master_count,
        "tectonic_worker_count": config.worker_count,
    }

    platform = config.platform.selected()
    if isinstance(platform, AWSPlatform):
        tfvars["tectonic_aws_region"] = platform.region
        tfvars["tectonic_aws_extra_tags"] = dict(platform.user_tags)
    elif isinstance(platform, OpenStackPlatform):
        tfvars["tectonic_openstack_region"] = platform.region
        tfvars["tectonic_openstack_cloud"] = platform.cloud
        tfvars["tectonic_openstack_external_network"] = platform.external_network
    elif isinstance(platform, LibvirtPlatform):
        tfvars["tectonic_libvirt_uri"] = platform.uri
        tfvars["tectonic_libvirt_network_if"] = platform.network_if_name
    else:
        raise ConfigurationError("no known platform")
    return tfvars


class TerraformVariables(Asset):
    """Renders the variables consumed by the platform Terraform module."""

    name = "Terraform Variables"

    def __init__(self) -> None:
        self.file_list: List[Artifact] = []

    def dependencies(self) -> List[Asset]:
        return [InstallConfig()]

    def generate(self, parents: Parents) -> None:
        install_config = parents[InstallConfig]
        data = json.dumps(build_tfvars(install_config.config), indent=2, sort_keys=True)
        self.file_list = [
            Artifact(filename=VARIABLES_FILE_NAME, data=(data + "\n").encode("utf-8"))
        ]

    def files(self) -> List[Artifact]:
        return self.file_list

    def load(self, fetcher: FileFetcher) -> bool:
        try:
            artifact = fetcher.fetch_by_name(VARIABLES_FILE_NAME)
        except FileNotFoundError:
            return False
        self.file_list = [artifact]
        return True
