"""cluster-installer - asset graph for provisioning Kubernetes clusters.

Assets declare their dependencies, are generated from their resolved
parents, and are reused from disk on later runs.  The ``Cluster`` asset
drives Terraform; the ``Tectonic`` asset renders the cluster manifests.
"""

try:
    from importlib.metadata import version

    __version__ = version("cluster-installer")
except Exception:
    __version__ = "0.0.0.dev0"

__all__ = ["__version__"]
