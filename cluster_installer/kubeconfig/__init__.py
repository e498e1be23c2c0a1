"""Administrator kubeconfig, supplied by the user."""

from typing import Tuple

from cluster_installer.asset.provided import ProvidedAsset

#: Location of the admin kubeconfig inside the asset directory.
ADMIN_KUBECONFIG_PATH = "auth/kubeconfig"


class Admin(ProvidedAsset):
    """Kubeconfig with cluster-admin credentials."""

    name = "Kubeconfig Admin"
    filenames: Tuple[str, ...] = (ADMIN_KUBECONFIG_PATH,)


__all__ = ["ADMIN_KUBECONFIG_PATH", "Admin"]
