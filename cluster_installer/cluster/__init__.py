"""Cluster provisioning: Terraform variables, launch, and metadata."""

from cluster_installer.cluster.cluster import (
    Cluster,
    load_metadata,
    platform_metadata,
)
from cluster_installer.cluster.metadata import (
    METADATA_FILE_NAME,
    ClusterAWSPlatformMetadata,
    ClusterLibvirtPlatformMetadata,
    ClusterMetadata,
    ClusterOpenStackPlatformMetadata,
    ClusterPlatformMetadata,
)
from cluster_installer.cluster.tfvars import TerraformVariables, build_tfvars

__all__ = [
    "Cluster",
    "ClusterAWSPlatformMetadata",
    "ClusterLibvirtPlatformMetadata",
    "ClusterMetadata",
    "ClusterOpenStackPlatformMetadata",
    "ClusterPlatformMetadata",
    "METADATA_FILE_NAME",
    "TerraformVariables",
    "build_tfvars",
    "load_metadata",
    "platform_metadata",
]
