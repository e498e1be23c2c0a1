"""Install configuration: models and the user-supplied asset."""

from cluster_installer.installconfig.asset import (
    INSTALL_CONFIG_FILENAME,
    InstallConfig,
    load_install_config,
    parse_install_config,
)
from cluster_installer.installconfig.models import (
    PLATFORM_AWS,
    PLATFORM_LIBVIRT,
    PLATFORM_OPENSTACK,
    AWSPlatform,
    InstallConfigSpec,
    LibvirtPlatform,
    MachinePool,
    ObjectMeta,
    OpenStackPlatform,
    Platform,
    PlatformConfig,
)

__all__ = [
    "AWSPlatform",
    "INSTALL_CONFIG_FILENAME",
    "InstallConfig",
    "InstallConfigSpec",
    "LibvirtPlatform",
    "MachinePool",
    "ObjectMeta",
    "OpenStackPlatform",
    "PLATFORM_AWS",
    "PLATFORM_LIBVIRT",
    "PLATFORM_OPENSTACK",
    "Platform",
    "PlatformConfig",
    "load_install_config",
    "parse_install_config",
]
