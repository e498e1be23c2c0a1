"""Tests for the disk fetcher and user-supplied assets."""

from __future__ import annotations

import pytest

from cluster_installer.asset import Artifact, DiskFileFetcher, MissingAssetError, Parents
from cluster_installer.kubeconfig import ADMIN_KUBECONFIG_PATH, Admin
from cluster_installer.tls import IngressCertKey, KubeCA


# ── TestDiskFileFetcher ──────────────────────────────────────────────────


class TestDiskFileFetcher:
    def test_fetch_by_name(self, tmp_path):
        (tmp_path / "a.txt").write_bytes(b"hello")
        artifact = DiskFileFetcher(tmp_path).fetch_by_name("a.txt")
        assert artifact.filename == "a.txt"
        assert artifact.data == b"hello"

    def test_fetch_by_name_missing_is_file_not_found(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DiskFileFetcher(tmp_path).fetch_by_name("nope")

    def test_fetch_by_pattern_sorted_relative(self, tmp_path):
        sub = tmp_path / "tectonic"
        sub.mkdir()
        (sub / "b.yaml").write_bytes(b"b")
        (sub / "a.yaml").write_bytes(b"a")
        (sub / "nested").mkdir()
        found = DiskFileFetcher(tmp_path).fetch_by_pattern("tectonic/*")
        assert [f.filename for f in found] == ["tectonic/a.yaml", "tectonic/b.yaml"]

    def test_fetch_by_pattern_no_match(self, tmp_path):
        assert DiskFileFetcher(tmp_path).fetch_by_pattern("tectonic/*") == []


# ── TestProvidedAsset ────────────────────────────────────────────────────


class TestProvidedAsset:
    def test_load_all_present(self, tmp_path):
        (tmp_path / "tls").mkdir()
        (tmp_path / "tls" / "kube-ca.crt").write_bytes(b"crt")
        (tmp_path / "tls" / "kube-ca.key").write_bytes(b"key")
        asset = KubeCA()
        assert asset.load(DiskFileFetcher(tmp_path)) is True
        assert asset.files() == [
            Artifact(filename="tls/kube-ca.crt", data=b"crt"),
            Artifact(filename="tls/kube-ca.key", data=b"key"),
        ]

    def test_partial_set_is_a_miss(self, tmp_path):
        (tmp_path / "tls").mkdir()
        (tmp_path / "tls" / "ingress.crt").write_bytes(b"crt")
        asset = IngressCertKey()
        assert asset.load(DiskFileFetcher(tmp_path)) is False
        assert asset.files() == []

    def test_absent_is_a_miss(self, tmp_path):
        assert Admin().load(DiskFileFetcher(tmp_path)) is False

    def test_generate_names_required_files(self):
        with pytest.raises(MissingAssetError, match=ADMIN_KUBECONFIG_PATH):
            Admin().generate(Parents({}))
