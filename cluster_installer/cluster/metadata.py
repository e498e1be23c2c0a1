"""Cluster metadata record (``metadata.json``).

Serialized form::

    {
      "ClusterName": "mycluster",
      "ClusterPlatformMetadata": {
        "AWS": {
          "Region": "us-east-1",
          "Identifier": [
            {"tectonicClusterID": "abc123"},
            {"kubernetes.io/cluster/mycluster": "owned"}
          ]
        }
      }
    }

At most one platform key is present; unset platforms are omitted.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from cluster_installer.installconfig.models import (
    PLATFORM_AWS,
    PLATFORM_LIBVIRT,
    PLATFORM_OPENSTACK,
)

#: Name of the metadata artifact.
METADATA_FILE_NAME = "metadata.json"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ClusterAWSPlatformMetadata(_Model):
    region: str = Field(alias="Region")
    identifier: List[Dict[str, str]] = Field(alias="Identifier")


class ClusterOpenStackPlatformMetadata(_Model):
    region: str = Field(alias="Region")
    identifier: Dict[str, str] = Field(alias="Identifier")


class ClusterLibvirtPlatformMetadata(_Model):
    uri: str = Field(alias="URI")


class ClusterPlatformMetadata(_Model):
    aws: Optional[ClusterAWSPlatformMetadata] = Field(default=None, alias="AWS")
    openstack: Optional[ClusterOpenStackPlatformMetadata] = Field(
        default=None, alias="OpenStack"
    )
    libvirt: Optional[ClusterLibvirtPlatformMetadata] = Field(
        default=None, alias="Libvirt"
    )

    @model_validator(mode="after")
    def _at_most_one(self) -> "ClusterPlatformMetadata":
        populated = [
            n for n in ("aws", "openstack", "libvirt") if getattr(self, n) is not None
        ]
        if len(populated) > 1:
            raise ValueError(
                f"only one platform may be populated, got: {', '.join(populated)}"
            )
        return self

    def platform_name(self) -> str:
        """Return the discriminator of the populated platform, or ``""``."""
        if self.aws is not None:
            return PLATFORM_AWS
        if self.openstack is not None:
            return PLATFORM_OPENSTACK
        if self.libvirt is not None:
            return PLATFORM_LIBVIRT
        return ""


class ClusterMetadata(_Model):
    """Identity of a provisioned cluster."""

    cluster_name: str = Field(alias="ClusterName")
    cluster_platform_metadata: ClusterPlatformMetadata = Field(
        default_factory=ClusterPlatformMetadata, alias="ClusterPlatformMetadata"
    )

    def platform_name(self) -> str:
        return self.cluster_platform_metadata.platform_name()

    def to_json(self) -> bytes:
        """Serialize with the on-disk key names, omitting unset platforms."""
        return self.model_dump_json(by_alias=True, exclude_none=True).encode(
            "utf-8"
        )
