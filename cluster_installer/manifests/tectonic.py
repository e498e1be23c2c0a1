"""Tectonic manifests: the resources installed next to bootkube.

All files land under ``tectonic/``.  The first one is always the
``tectonic-system/cluster-config-v1`` config map, which is also what
:meth:`Tectonic.load` uses to tell a complete manifest set from leftovers.
"""

from __future__ import annotations

import base64
import logging
import posixpath
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.asset.errors import AssetError
from cluster_installer.asset.fetcher import FileFetcher
from cluster_installer.installconfig.asset import InstallConfig
from cluster_installer.machines.assets import ClusterK8sIO, Master, Worker
from cluster_installer.manifests.addon import KubeAddonOperator
from cluster_installer.manifests.content import tectonic as content
from cluster_installer.render.renderer import (
    TectonicTemplateData,
    TemplateError,
    apply_template_data,
)
from cluster_installer.tls import IngressCertKey, KubeCA

logger = logging.getLogger(__name__)

TECTONIC_MANIFEST_DIR = "tectonic"
TECTONIC_CONFIG_PATH = posixpath.join(TECTONIC_MANIFEST_DIR, "00_cluster-config.yaml")

KUBE_ADDON_OPERATOR_IMAGE = (
    "quay.io/coreos/kube-addon-operator-dev:375423a332f2c12b79438fc6a6da6e448e28ec0f"
)


# ---------------------------------------------------------------------------
# Configuration object
# ---------------------------------------------------------------------------


class ObjectMetadata(BaseModel):
    namespace: str
    name: str


class ConfigurationObject(BaseModel):
    """A ``v1/ConfigMap`` carrying string-valued configuration."""

    model_config = ConfigDict(populate_by_name=True)

    api_version: str = Field(default="v1", alias="apiVersion")
    kind: str = "ConfigMap"
    metadata: ObjectMetadata
    data: Dict[str, str] = Field(default_factory=dict)

    def to_yaml(self) -> bytes:
        return yaml.safe_dump(self.model_dump(by_alias=True)).encode("utf-8")

    @classmethod
    def from_yaml(cls, data: bytes) -> "ConfigurationObject":
        return cls.model_validate(yaml.safe_load(data))


def config_map(namespace: str, name: str, data: Dict[str, str]) -> ConfigurationObject:
    return ConfigurationObject(
        metadata=ObjectMetadata(namespace=namespace, name=name), data=data
    )


# ---------------------------------------------------------------------------
# Asset
# ---------------------------------------------------------------------------


class Tectonic(Asset):
    """Generates the dependent resource manifests for tectonic."""

    name = "Tectonic Manifests"

    def __init__(self) -> None:
        self.tectonic_config: Optional[ConfigurationObject] = None
        self.file_list: List[Artifact] = []

    def dependencies(self) -> List[Asset]:
        return [
            InstallConfig(),
            IngressCertKey(),
            KubeCA(),
            ClusterK8sIO(),
            Worker(),
            Master(),
            KubeAddonOperator(),
        ]

    def generate(self, parents: Parents) -> None:
        install_config, cluster_k8s_io, worker, master, addon = parents.get_all(
            InstallConfig, ClusterK8sIO, Worker, Master, KubeAddonOperator
        )
        config = install_config.config

        template_data = TectonicTemplateData(
            KubeAddonOperatorImage=KUBE_ADDON_OPERATOR_IMAGE,
            PullSecret=base64.b64encode(config.pull_secret.encode("utf-8")).decode(
                "ascii"
            ),
        )

        try:
            asset_data: Dict[str, bytes] = {
                "99_binding-discovery.yaml": content.BINDING_DISCOVERY.encode(),
                "99_kube-addon-00-appversion.yaml": content.APP_VERSION_KUBE_ADDON.encode(),
                "99_kube-addon-01-operator.yaml": apply_template_data(
                    content.KUBE_ADDON_OPERATOR, template_data
                ),
                "99_openshift-cluster-api_cluster.yaml": cluster_k8s_io.raw,
                "99_openshift-cluster-api_master-machines.yaml": master.machines_raw,
                "99_openshift-cluster-api_master-user-data-secrets.yaml": master.user_data_secrets_raw,
                "99_openshift-cluster-api_worker-machineset.yaml": worker.machine_set_raw,
                "99_openshift-cluster-api_worker-user-data-secret.yaml": worker.user_data_secret_raw,
                "99_role-admin.yaml": content.ROLE_ADMIN.encode(),
                "99_role-user.yaml": content.ROLE_USER.encode(),
                "99_tectonic-system-00-binding-admin.yaml": content.BINDING_ADMIN.encode(),
                "99_tectonic-system-02-pull.json": apply_template_data(
                    content.PULL_TECTONIC_SYSTEM, template_data
                ),
            }
        except TemplateError as exc:
            raise AssetError(f"failed to render tectonic manifests: {exc}") from exc

        # addon goes to tectonic-system
        tectonic_config = config_map(
            "tectonic-system",
            "cluster-config-v1",
            {"addon-config": addon.files()[0].text()},
        )
        try:
            tectonic_config_data = tectonic_config.to_yaml()
        except (yaml.YAMLError, ValueError) as exc:
            raise AssetError(
                f"failed to create tectonic-system/cluster-config-v1 configmap: {exc}"
            ) from exc

        file_list = [Artifact(filename=TECTONIC_CONFIG_PATH, data=tectonic_config_data)]
        for name in sorted(asset_data):
            file_list.append(
                Artifact(
                    filename=posixpath.join(TECTONIC_MANIFEST_DIR, name),
                    data=asset_data[name],
                )
            )

        self.tectonic_config, self.file_list = tectonic_config, file_list

    def files(self) -> List[Artifact]:
        return self.file_list

    def load(self, fetcher: FileFetcher) -> bool:
        file_list = fetcher.fetch_by_pattern(posixpath.join(TECTONIC_MANIFEST_DIR, "*"))
        if not file_list:
            return False

        tectonic_config: Optional[ConfigurationObject] = None
        for artifact in file_list:
            if artifact.filename == TECTONIC_CONFIG_PATH:
                try:
                    tectonic_config = ConfigurationObject.from_yaml(artifact.data)
                except (yaml.YAMLError, ValidationError) as exc:
                    raise AssetError(
                        f"failed to unmarshal {TECTONIC_CONFIG_PATH}: {exc}"
                    ) from exc

        if tectonic_config is None:
            logger.warning(
                "%s has files but no %s; regenerating",
                TECTONIC_MANIFEST_DIR,
                TECTONIC_CONFIG_PATH,
            )
            return False

        self.file_list, self.tectonic_config = file_list, tectonic_config
        return True
