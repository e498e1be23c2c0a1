"""TLS material, supplied by the user."""

from typing import Tuple

from cluster_installer.asset.provided import ProvidedAsset

TLS_DIR = "tls"


class IngressCertKey(ProvidedAsset):
    """Certificate and key served by the cluster ingress."""

    name = "Certificate (ingress)"
    filenames: Tuple[str, ...] = (f"{TLS_DIR}/ingress.crt", f"{TLS_DIR}/ingress.key")


class KubeCA(ProvidedAsset):
    """Kubernetes cluster certificate authority."""

    name = "Certificate (kube-ca)"
    filenames: Tuple[str, ...] = (f"{TLS_DIR}/kube-ca.crt", f"{TLS_DIR}/kube-ca.key")


__all__ = ["IngressCertKey", "KubeCA", "TLS_DIR"]
