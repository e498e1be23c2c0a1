"""Tests for the cluster-installer CLI."""

from __future__ import annotations

import json
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import yaml
from typer.testing import CliRunner

from cluster_installer.cli import (
    EXIT_ASSET_FAILURE,
    EXIT_CLUSTER_EXISTS,
    EXIT_SUCCESS,
    EXIT_USAGE,
    app,
)
from cluster_installer.cluster import METADATA_FILE_NAME
from cluster_installer.installconfig import INSTALL_CONFIG_FILENAME
from cluster_installer.kubeconfig import ADMIN_KUBECONFIG_PATH
from cluster_installer.terraform import STATE_FILE_NAME, TerraformError

from conftest import make_spec

runner = CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("CLUSTER_INSTALLER_DIR", raising=False)
    monkeypatch.delenv("CLUSTER_INSTALLER_TERRAFORM_TIMEOUT", raising=False)


def _seed(directory: Path) -> None:
    """Write the user-provided inputs the cluster target needs."""
    spec = make_spec()
    (directory / INSTALL_CONFIG_FILENAME).write_text(
        yaml.safe_dump(spec.model_dump(by_alias=True, exclude_none=True))
    )
    kubeconfig = directory / ADMIN_KUBECONFIG_PATH
    kubeconfig.parent.mkdir(parents=True, exist_ok=True)
    kubeconfig.write_text("apiVersion: v1\nkind: Config\n")


class TestCreate:
    def test_unknown_target(self, tmp_path):
        result = runner.invoke(app, ["create", "bogus", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_USAGE
        assert "Unknown target" in result.output

    def test_missing_install_config(self, tmp_path):
        result = runner.invoke(app, ["create", "terraform-variables", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_ASSET_FAILURE
        assert INSTALL_CONFIG_FILENAME in result.output

    def test_terraform_variables_written(self, tmp_path):
        _seed(tmp_path)
        result = runner.invoke(app, ["create", "terraform-variables", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_SUCCESS, result.output
        tfvars = json.loads((tmp_path / "terraform.tfvars").read_text())
        assert tfvars["tectonic_cluster_name"] == "mycluster"

    def test_manifests_written(self, tmp_path):
        _seed(tmp_path)
        for name in ("ingress.crt", "ingress.key", "kube-ca.crt", "kube-ca.key"):
            (tmp_path / "tls").mkdir(exist_ok=True)
            (tmp_path / "tls" / name).write_text("pem")
        result = runner.invoke(app, ["create", "manifests", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert (tmp_path / "tectonic" / "00_cluster-config.yaml").is_file()

    def test_existing_state_refused(self, tmp_path):
        _seed(tmp_path)
        (tmp_path / STATE_FILE_NAME).write_text("{}")
        result = runner.invoke(app, ["create", "cluster", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_CLUSTER_EXISTS
        assert STATE_FILE_NAME in result.output

    def test_cluster_success(self, tmp_path, monkeypatch):
        _seed(tmp_path)

        def fake_apply(working_dir, platform, *extra, settings=None):
            state = os.path.join(working_dir, STATE_FILE_NAME)
            Path(state).write_text('{"version": 4}')
            return state

        monkeypatch.setattr("cluster_installer.terraform.runner.apply", fake_apply)
        result = runner.invoke(app, ["create", "cluster", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_SUCCESS, result.output
        assert (tmp_path / STATE_FILE_NAME).read_text() == '{"version": 4}'
        assert (tmp_path / METADATA_FILE_NAME).is_file()

    def test_failed_apply_keeps_state(self, tmp_path, monkeypatch):
        _seed(tmp_path)

        def fake_apply(working_dir, platform, *extra, settings=None):
            state = os.path.join(working_dir, STATE_FILE_NAME)
            Path(state).write_text('{"partial": true}')
            raise TerraformError("failed to apply using terraform", state_file=state)

        monkeypatch.setattr("cluster_installer.terraform.runner.apply", fake_apply)
        result = runner.invoke(app, ["create", "cluster", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_ASSET_FAILURE
        assert (tmp_path / STATE_FILE_NAME).read_text() == '{"partial": true}'
        assert (tmp_path / METADATA_FILE_NAME).is_file()


class TestMetadata:
    def test_missing(self, tmp_path):
        result = runner.invoke(app, ["metadata", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_ASSET_FAILURE
        assert "failed to read metadata.json" in result.output

    def test_summary_and_json(self, tmp_path):
        (tmp_path / METADATA_FILE_NAME).write_text(
            '{"ClusterName": "mycluster", '
            '"ClusterPlatformMetadata": {"Libvirt": {"URI": "qemu:///system"}}}'
        )
        result = runner.invoke(app, ["metadata", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_SUCCESS
        assert "mycluster" in result.output
        assert "libvirt" in result.output

        result = runner.invoke(app, ["metadata", "--dir", str(tmp_path), "--json"])
        assert result.exit_code == EXIT_SUCCESS
        assert json.loads(result.output)["ClusterName"] == "mycluster"

    def test_unexecutable_terraform_reports_failure(self, tmp_path, monkeypatch):
        _seed(tmp_path)
        monkeypatch.setattr(
            "cluster_installer.terraform.runner.subprocess.run",
            MagicMock(side_effect=PermissionError(13, "Permission denied")),
        )
        result = runner.invoke(app, ["create", "cluster", "--dir", str(tmp_path)])
        assert result.exit_code == EXIT_ASSET_FAILURE
        assert not isinstance(result.exception, PermissionError)
        assert (tmp_path / METADATA_FILE_NAME).is_file()
