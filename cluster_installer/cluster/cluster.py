"""Cluster asset: launch the cluster with Terraform.

Generation runs ``terraform apply`` in a throw-away working directory that
holds only the rendered ``terraform.tfvars``.  The resulting state file and
the cluster metadata record are captured as artifacts.  Capture is
best-effort: a failed apply may still have created resources, so whatever
state exists is kept while the apply error is still the one raised.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from pydantic import ValidationError

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.asset.errors import (
    AssetError,
    ClusterAlreadyExistsError,
    ConfigurationError,
    ErrorAccumulator,
    ProvisioningError,
    ResourceError,
    wrap,
)
from cluster_installer.asset.fetcher import FileFetcher
from cluster_installer.cluster.metadata import (
    METADATA_FILE_NAME,
    ClusterAWSPlatformMetadata,
    ClusterLibvirtPlatformMetadata,
    ClusterMetadata,
    ClusterOpenStackPlatformMetadata,
    ClusterPlatformMetadata,
)
from cluster_installer.cluster.tfvars import TerraformVariables
from cluster_installer.installconfig.asset import InstallConfig
from cluster_installer.installconfig.models import (
    AWSPlatform,
    InstallConfigSpec,
    LibvirtPlatform,
    OpenStackPlatform,
)
from cluster_installer.kubeconfig import Admin
from cluster_installer.terraform import runner as terraform
from cluster_installer.terraform.runner import STATE_FILE_NAME, TerraformError

logger = logging.getLogger(__name__)

#: ``(working_dir, platform) -> state file path``; raises TerraformError.
ApplyFn = Callable[[str, str], str]

TEMP_DIR_PREFIX = "cluster-installer-"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def platform_metadata(config: InstallConfigSpec) -> ClusterPlatformMetadata:
    """Return the metadata variant matching the configured platform.

    Raises :class:`ConfigurationError` when no known platform is set.
    """
    platform = config.platform.selected()
    if isinstance(platform, AWSPlatform):
        return ClusterPlatformMetadata(
            aws=ClusterAWSPlatformMetadata(
                region=platform.region,
                identifier=[
                    {"tectonicClusterID": config.cluster_id},
                    {f"kubernetes.io/cluster/{config.metadata.name}": "owned"},
                ],
            )
        )
    if isinstance(platform, OpenStackPlatform):
        return ClusterPlatformMetadata(
            openstack=ClusterOpenStackPlatformMetadata(
                region=platform.region,
                identifier={"tectonicClusterID": config.cluster_id},
            )
        )
    if isinstance(platform, LibvirtPlatform):
        return ClusterPlatformMetadata(
            libvirt=ClusterLibvirtPlatformMetadata(uri=platform.uri)
        )
    raise ConfigurationError("no known platform")


@contextmanager
def _scoped_workdir(prefix: str = TEMP_DIR_PREFIX) -> Iterator[Path]:
    """Yield a fresh temp directory and remove it on every exit path."""
    try:
        path = tempfile.mkdtemp(prefix=prefix)
    except OSError as exc:
        raise ResourceError(
            f"failed to create temp dir for terraform execution: {exc}"
        ) from exc

    failed = False
    try:
        yield Path(path)
    except BaseException:
        failed = True
        raise
    finally:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            if failed:
                logger.error("Failed to remove temp dir %s: %s", path, exc)
            else:
                raise ResourceError(
                    f"failed to remove temp dir {path}: {exc}"
                ) from exc


def _write_private(path: Path, data: bytes) -> None:
    """Write *data* to *path* readable and writable by the owner only."""
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "wb") as fh:
        fh.write(data)


# ---------------------------------------------------------------------------
# Asset
# ---------------------------------------------------------------------------


class Cluster(Asset):
    """Launches the cluster from the generated Terraform variables."""

    name = "Cluster"

    def __init__(self, apply_fn: Optional[ApplyFn] = None) -> None:
        self.file_list: List[Artifact] = []
        self.metadata: Optional[ClusterMetadata] = None
        self._apply_fn = apply_fn

    def dependencies(self) -> List[Asset]:
        return [InstallConfig(), TerraformVariables(), Admin()]

    def generate(self, parents: Parents) -> None:
        install_config, tfvars, _admin = parents.get_all(
            InstallConfig, TerraformVariables, Admin
        )
        config: InstallConfigSpec = install_config.config
        self.file_list = []

        # Fails before any disk write or subprocess when no platform is set.
        self.metadata = ClusterMetadata(
            cluster_name=config.metadata.name,
            cluster_platform_metadata=platform_metadata(config),
        )

        with _scoped_workdir() as tmp_dir:
            variables = tfvars.files()[0]
            try:
                _write_private(tmp_dir / variables.filename, variables.data)
            except OSError as exc:
                raise ResourceError(
                    f"failed to write {variables.filename} file: {exc}"
                ) from exc

            errors = ErrorAccumulator()
            try:
                self._apply(tmp_dir, config.platform.name(), errors)
            finally:
                self._append_metadata(errors)
            errors.raise_first()

    def _apply(self, tmp_dir: Path, platform: str, errors: ErrorAccumulator) -> None:
        apply_fn = self._apply_fn or terraform.apply

        logger.info("Using Terraform to create cluster...")
        try:
            state_file: Optional[str] = apply_fn(str(tmp_dir), platform)
        except TerraformError as exc:
            errors.record(wrap(exc, "failed to run terraform", ProvisioningError))
            state_file = exc.state_file

        if state_file is None:
            return

        try:
            data = Path(state_file).read_bytes()
        except OSError as exc:
            errors.record(wrap(exc, f"failed to read {STATE_FILE_NAME}", ResourceError))
            return
        self.file_list.append(Artifact(filename=STATE_FILE_NAME, data=data))

    def _append_metadata(self, errors: ErrorAccumulator) -> None:
        try:
            data = self.metadata.to_json()
        except (TypeError, ValueError) as exc:
            errors.record(wrap(exc, "failed to marshal ClusterMetadata"))
            return
        self.file_list.append(Artifact(filename=METADATA_FILE_NAME, data=data))

    def files(self) -> List[Artifact]:
        return self.file_list

    def load(self, fetcher: FileFetcher) -> bool:
        """Refuse to reuse an existing state file.

        Returns ``False`` when no state file exists.  An existing one means
        a cluster may already be running, which is an error rather than a
        cache hit.
        """
        try:
            fetcher.fetch_by_name(STATE_FILE_NAME)
        except FileNotFoundError:
            return False

        raise ClusterAlreadyExistsError(
            f'"{STATE_FILE_NAME}" already exists.  '
            "There may already be a running cluster"
        )


# ---------------------------------------------------------------------------
# Metadata access
# ---------------------------------------------------------------------------


def load_metadata(directory: str | Path) -> ClusterMetadata:
    """Load the cluster metadata from an asset directory."""
    path = Path(directory) / METADATA_FILE_NAME
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise AssetError(f"failed to read {METADATA_FILE_NAME} file: {exc}") from exc

    try:
        return ClusterMetadata.model_validate_json(raw)
    except ValidationError as exc:
        raise AssetError(
            f"failed to parse data from {METADATA_FILE_NAME} file "
            f"to ClusterMetadata: {exc}"
        ) from exc
