"""Pydantic models for ``install-config.yaml``.

Structure::

    metadata:
      name: mycluster
    clusterID: abc123
    baseDomain: example.com
    pullSecret: '{"auths": {...}}'
    sshKey: ssh-ed25519 AAAA...
    machines:
      - name: master
        replicas: 3
      - name: worker
        replicas: 3
    platform:
      aws:
        region: us-east-1

Exactly one key under ``platform`` may be set.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

#: Platform discriminators, in the order they are matched.
PLATFORM_AWS = "aws"
PLATFORM_OPENSTACK = "openstack"
PLATFORM_LIBVIRT = "libvirt"

DEFAULT_MASTER_REPLICAS = 3
DEFAULT_WORKER_REPLICAS = 3


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ObjectMeta(_Model):
    name: str


class AWSPlatform(_Model):
    region: str
    user_tags: dict = Field(default_factory=dict, alias="userTags")


class OpenStackPlatform(_Model):
    region: str
    cloud: str = ""
    external_network: str = Field(default="", alias="externalNetwork")


class LibvirtPlatform(_Model):
    uri: str = Field(alias="URI")
    network_if_name: str = Field(default="tt0", alias="networkInterfaceName")


#: Closed set of platform configurations.
PlatformConfig = Union[AWSPlatform, OpenStackPlatform, LibvirtPlatform]


class Platform(_Model):
    """Holds at most one platform configuration."""

    aws: Optional[AWSPlatform] = None
    openstack: Optional[OpenStackPlatform] = None
    libvirt: Optional[LibvirtPlatform] = None

    @model_validator(mode="after")
    def _single_platform(self) -> "Platform":
        configured = [
            n for n in (PLATFORM_AWS, PLATFORM_OPENSTACK, PLATFORM_LIBVIRT)
            if getattr(self, n) is not None
        ]
        if len(configured) > 1:
            raise ValueError(
                f"only one platform may be configured, got: {', '.join(configured)}"
            )
        return self

    def selected(self) -> Optional[PlatformConfig]:
        """Return the configured platform, or ``None``."""
        for candidate in (self.aws, self.openstack, self.libvirt):
            if candidate is not None:
                return candidate
        return None

    def name(self) -> str:
        """Return the discriminator of the configured platform, or ``""``."""
        selected = self.selected()
        if isinstance(selected, AWSPlatform):
            return PLATFORM_AWS
        if isinstance(selected, OpenStackPlatform):
            return PLATFORM_OPENSTACK
        if isinstance(selected, LibvirtPlatform):
            return PLATFORM_LIBVIRT
        return ""


class MachinePool(_Model):
    name: str
    replicas: Optional[int] = None


class InstallConfigSpec(_Model):
    """Root of ``install-config.yaml``."""

    metadata: ObjectMeta
    cluster_id: str = Field(alias="clusterID")
    base_domain: str = Field(default="", alias="baseDomain")
    pull_secret: str = Field(default="", alias="pullSecret")
    ssh_key: str = Field(default="", alias="sshKey")
    machines: List[MachinePool] = Field(default_factory=list)
    platform: Platform = Field(default_factory=Platform)

    def replicas(self, pool: str, default: int) -> int:
        """Return the replica count of machine pool *pool*."""
        for machine in self.machines:
            if machine.name == pool and machine.replicas is not None:
                return machine.replicas
        return default

    @property
    def master_count(self) -> int:
        return self.replicas("master", DEFAULT_MASTER_REPLICAS)

    @property
    def worker_count(self) -> int:
        return self.replicas("worker", DEFAULT_WORKER_REPLICAS)
