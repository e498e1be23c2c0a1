"""Installer settings."""

from cluster_installer.config.settings import ENV_PREFIX, InstallerSettings

__all__ = ["ENV_PREFIX", "InstallerSettings"]
