"""Asset graph: contract, disk fetcher, and memoized resolver."""

from cluster_installer.asset.base import (
    Artifact,
    Asset,
    Parents,
    write_files,
)
from cluster_installer.asset.errors import (
    AssetError,
    ClusterAlreadyExistsError,
    ConfigurationError,
    DependencyCycleError,
    ErrorAccumulator,
    MissingAssetError,
    ProvisioningError,
    ResourceError,
    find_cause,
    wrap,
)
from cluster_installer.asset.fetcher import DiskFileFetcher, FileFetcher
from cluster_installer.asset.provided import ProvidedAsset
from cluster_installer.asset.store import AssetStore

__all__ = [
    "Artifact",
    "Asset",
    "AssetError",
    "AssetStore",
    "ClusterAlreadyExistsError",
    "ConfigurationError",
    "DependencyCycleError",
    "DiskFileFetcher",
    "ErrorAccumulator",
    "FileFetcher",
    "MissingAssetError",
    "Parents",
    "ProvidedAsset",
    "ProvisioningError",
    "ResourceError",
    "find_cause",
    "wrap",
    "write_files",
]
