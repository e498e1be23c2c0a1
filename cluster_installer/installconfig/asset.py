"""The install configuration asset.

The installer never invents an install configuration: it is read from
``install-config.yaml`` in the asset directory, or seeded in memory with
:meth:`InstallConfig.from_spec`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml
from pydantic import ValidationError

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.asset.errors import ConfigurationError, MissingAssetError
from cluster_installer.asset.fetcher import FileFetcher
from cluster_installer.installconfig.models import InstallConfigSpec

logger = logging.getLogger(__name__)

#: Name of the install configuration file inside the asset directory.
INSTALL_CONFIG_FILENAME = "install-config.yaml"


def parse_install_config(data: bytes | str) -> InstallConfigSpec:
    """Parse and validate raw ``install-config.yaml`` content."""
    try:
        raw: Dict[str, Any] = yaml.safe_load(data) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"failed to parse {INSTALL_CONFIG_FILENAME}: {exc}"
        ) from exc
    try:
        return InstallConfigSpec.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(
            f"invalid {INSTALL_CONFIG_FILENAME}: {exc}"
        ) from exc


def load_install_config(path: str | Path) -> InstallConfigSpec:
    """Read ``install-config.yaml`` from *path*."""
    with open(path, encoding="utf-8") as fh:
        return parse_install_config(fh.read())


class InstallConfig(Asset):
    """User-supplied cluster configuration."""

    name = "Install Config"

    def __init__(self) -> None:
        self.config: InstallConfigSpec | None = None
        self.file_list: List[Artifact] = []

    @classmethod
    def from_spec(cls, spec: InstallConfigSpec) -> "InstallConfig":
        """Build an already-resolved asset around *spec*."""
        asset = cls()
        asset.config = spec
        data = yaml.safe_dump(
            spec.model_dump(by_alias=True, exclude_none=True),
            sort_keys=False,
        )
        asset.file_list = [
            Artifact(filename=INSTALL_CONFIG_FILENAME, data=data.encode("utf-8"))
        ]
        return asset

    def dependencies(self) -> List[Asset]:
        return []

    def generate(self, parents: Parents) -> None:
        raise MissingAssetError(
            f"{INSTALL_CONFIG_FILENAME} must be provided in the asset directory"
        )

    def files(self) -> List[Artifact]:
        return self.file_list

    def load(self, fetcher: FileFetcher) -> bool:
        try:
            artifact = fetcher.fetch_by_name(INSTALL_CONFIG_FILENAME)
        except FileNotFoundError:
            return False

        self.config = parse_install_config(artifact.data)
        self.file_list = [artifact]
        logger.debug("Loaded install config for %s", self.config.metadata.name)
        return True
