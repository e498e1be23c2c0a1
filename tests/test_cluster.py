"""Tests for the Cluster asset and cluster metadata."""

from __future__ import annotations

import functools
import json
import logging
import stat
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, patch

import pytest

from cluster_installer.asset import (
    Artifact,
    AssetError,
    AssetStore,
    ClusterAlreadyExistsError,
    ConfigurationError,
    DiskFileFetcher,
    Parents,
    ProvisioningError,
    ResourceError,
    write_files,
)
from cluster_installer.cluster import (
    METADATA_FILE_NAME,
    Cluster,
    ClusterMetadata,
    TerraformVariables,
    load_metadata,
)
from cluster_installer.config import InstallerSettings
from cluster_installer.installconfig import INSTALL_CONFIG_FILENAME, InstallConfig
from cluster_installer.kubeconfig import ADMIN_KUBECONFIG_PATH, Admin
from cluster_installer.terraform import STATE_FILE_NAME, VARIABLES_FILE_NAME, TerraformError
from cluster_installer.terraform import runner

from conftest import PLATFORMS, make_spec

STATE = b'{"version": 3, "serial": 1}'


# ── helpers ──────────────────────────────────────────────────────────────


def _parents(spec, tfvars_data: Optional[bytes] = None) -> Parents:
    install_config = InstallConfig.from_spec(spec)
    tfvars = TerraformVariables()
    if tfvars_data is None:
        tfvars.generate(Parents({InstallConfig: install_config}))
    else:
        tfvars.file_list = [Artifact(filename=VARIABLES_FILE_NAME, data=tfvars_data)]
    admin = Admin()
    admin.file_list = [Artifact(filename=ADMIN_KUBECONFIG_PATH, data=b"kubeconfig")]
    return Parents({InstallConfig: install_config, TerraformVariables: tfvars, Admin: admin})


def _fake_apply(
    *,
    fail: bool = False,
    write_state: bool = True,
    seen: Optional[Dict[str, Any]] = None,
):
    """Stand-in for terraform.apply that records what it saw."""

    def apply_fn(working_dir: str, platform: str) -> str:
        wd = Path(working_dir)
        tfvars = wd / VARIABLES_FILE_NAME
        if seen is not None:
            seen["dir"] = wd
            seen["platform"] = platform
            seen["mode"] = stat.S_IMODE(tfvars.stat().st_mode)
            seen["tfvars"] = tfvars.read_bytes()
        state_path = wd / STATE_FILE_NAME
        if write_state:
            state_path.write_bytes(STATE)
        if fail:
            raise TerraformError(
                "failed to apply using terraform", state_file=str(state_path)
            )
        return str(state_path)

    return apply_fn


def _by_name(cluster: Cluster) -> Dict[str, bytes]:
    return {f.filename: f.data for f in cluster.files()}


# ── TestDependencies ─────────────────────────────────────────────────────


class TestDependencies:
    def test_fixed_list(self):
        deps = Cluster().dependencies()
        assert [type(d) for d in deps] == [InstallConfig, TerraformVariables, Admin]


# ── TestGeneratePlatforms ────────────────────────────────────────────────


class TestGeneratePlatforms:
    @pytest.mark.parametrize("platform", sorted(PLATFORMS))
    def test_exactly_one_variant_matching_config(self, platform):
        spec = make_spec(PLATFORMS[platform])
        cluster = Cluster(apply_fn=_fake_apply())
        cluster.generate(_parents(spec))

        pm = cluster.metadata.cluster_platform_metadata
        populated = [n for n in ("aws", "openstack", "libvirt") if getattr(pm, n) is not None]
        assert populated == [platform]
        assert cluster.metadata.platform_name() == spec.platform.name()

    def test_aws_scenario_json(self):
        cluster = Cluster(apply_fn=_fake_apply())
        cluster.generate(_parents(make_spec(PLATFORMS["aws"])))

        data = json.loads(_by_name(cluster)[METADATA_FILE_NAME])
        assert data["ClusterName"] == "mycluster"
        aws = data["ClusterPlatformMetadata"]["AWS"]
        assert aws["Region"] == "us-east-1"
        assert {"tectonicClusterID": "abc123"} in aws["Identifier"]
        assert {"kubernetes.io/cluster/mycluster": "owned"} in aws["Identifier"]
        assert set(data["ClusterPlatformMetadata"]) == {"AWS"}

    def test_openstack_identifier(self):
        cluster = Cluster(apply_fn=_fake_apply())
        cluster.generate(_parents(make_spec(PLATFORMS["openstack"])))
        data = json.loads(_by_name(cluster)[METADATA_FILE_NAME])
        assert data["ClusterPlatformMetadata"]["OpenStack"] == {
            "Region": "RegionOne",
            "Identifier": {"tectonicClusterID": "abc123"},
        }

    def test_libvirt_uri(self):
        cluster = Cluster(apply_fn=_fake_apply())
        cluster.generate(_parents(make_spec(PLATFORMS["libvirt"])))
        data = json.loads(_by_name(cluster)[METADATA_FILE_NAME])
        assert data["ClusterPlatformMetadata"]["Libvirt"] == {
            "URI": "qemu+tcp://192.168.122.1/system"
        }

    def test_platform_name_passed_to_tool(self):
        seen: Dict[str, Any] = {}
        cluster = Cluster(apply_fn=_fake_apply(seen=seen))
        cluster.generate(_parents(make_spec(PLATFORMS["libvirt"])))
        assert seen["platform"] == "libvirt"


# ── TestNoPlatform ───────────────────────────────────────────────────────


class TestNoPlatform:
    def test_configuration_error_without_side_effects(self):
        apply_fn = MagicMock()
        cluster = Cluster(apply_fn=apply_fn)
        parents = _parents(make_spec({}), tfvars_data=b"{}")

        with patch("cluster_installer.cluster.cluster.tempfile.mkdtemp") as mkdtemp:
            with pytest.raises(ConfigurationError, match="no known platform"):
                cluster.generate(parents)

        mkdtemp.assert_not_called()
        apply_fn.assert_not_called()
        assert cluster.files() == []


# ── TestGenerateSuccess ──────────────────────────────────────────────────


class TestGenerateSuccess:
    def test_state_and_metadata_artifacts(self):
        cluster = Cluster(apply_fn=_fake_apply())
        cluster.generate(_parents(make_spec()))
        files = _by_name(cluster)
        assert files[STATE_FILE_NAME] == STATE
        assert METADATA_FILE_NAME in files
        assert [f.filename for f in cluster.files()] == [STATE_FILE_NAME, METADATA_FILE_NAME]

    def test_tfvars_written_owner_only(self):
        seen: Dict[str, Any] = {}
        parents = _parents(make_spec())
        Cluster(apply_fn=_fake_apply(seen=seen)).generate(parents)
        assert seen["mode"] == 0o600
        assert seen["tfvars"] == parents[TerraformVariables].files()[0].data

    def test_temp_dir_removed(self):
        seen: Dict[str, Any] = {}
        Cluster(apply_fn=_fake_apply(seen=seen)).generate(_parents(make_spec()))
        assert seen["dir"].name.startswith("cluster-installer-")
        assert not seen["dir"].exists()


# ── TestGenerateFailures ─────────────────────────────────────────────────


class TestGenerateFailures:
    def test_partial_state_kept_and_apply_error_raised(self):
        cluster = Cluster(apply_fn=_fake_apply(fail=True))
        with pytest.raises(ProvisioningError, match="failed to run terraform") as excinfo:
            cluster.generate(_parents(make_spec()))

        assert isinstance(excinfo.value.__cause__, TerraformError)
        files = _by_name(cluster)
        assert files[STATE_FILE_NAME] == STATE
        assert METADATA_FILE_NAME in files

    def test_apply_and_read_fail_only_apply_error(self, caplog):
        cluster = Cluster(apply_fn=_fake_apply(fail=True, write_state=False))
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ProvisioningError):
                cluster.generate(_parents(make_spec()))

        assert f"failed to read {STATE_FILE_NAME}" in caplog.text
        assert list(_by_name(cluster)) == [METADATA_FILE_NAME]

    def test_apply_ok_read_fails_raises_read_error(self):
        cluster = Cluster(apply_fn=_fake_apply(write_state=False))
        with pytest.raises(ResourceError, match=f"failed to read {STATE_FILE_NAME}"):
            cluster.generate(_parents(make_spec()))
        assert list(_by_name(cluster)) == [METADATA_FILE_NAME]

    def test_tool_missing_no_state_path(self):
        def apply_fn(working_dir, platform):
            raise TerraformError("terraform CLI not found on PATH")

        cluster = Cluster(apply_fn=apply_fn)
        with pytest.raises(ProvisioningError, match="not found on PATH"):
            cluster.generate(_parents(make_spec()))
        assert list(_by_name(cluster)) == [METADATA_FILE_NAME]

    def test_unexecutable_binary_is_a_provisioning_error(self, tmp_path):
        tf_bin = tmp_path / "terraform"
        settings = InstallerSettings(
            terraform_bin=str(tf_bin), terraform_data_dir=tmp_path / "data"
        )
        cluster = Cluster(apply_fn=functools.partial(runner.apply, settings=settings))
        with patch(
            "cluster_installer.terraform.runner.subprocess.run",
            side_effect=PermissionError(13, "Permission denied", str(tf_bin)),
        ):
            with pytest.raises(ProvisioningError, match="failed to run terraform"):
                cluster.generate(_parents(make_spec()))
        assert list(_by_name(cluster)) == [METADATA_FILE_NAME]

    def test_temp_dir_removed_on_failure(self):
        seen: Dict[str, Any] = {}
        with pytest.raises(ProvisioningError):
            Cluster(apply_fn=_fake_apply(fail=True, seen=seen)).generate(
                _parents(make_spec())
            )
        assert not seen["dir"].exists()

    def test_metadata_marshal_error_raised_when_first(self):
        broken = MagicMock()
        broken.to_json.side_effect = ValueError("cannot serialize")
        cluster = Cluster(apply_fn=_fake_apply())
        with patch("cluster_installer.cluster.cluster.ClusterMetadata", return_value=broken):
            with pytest.raises(AssetError, match="failed to marshal ClusterMetadata"):
                cluster.generate(_parents(make_spec()))
        assert list(_by_name(cluster)) == [STATE_FILE_NAME]

    def test_metadata_marshal_error_logged_after_apply_error(self, caplog):
        broken = MagicMock()
        broken.to_json.side_effect = ValueError("cannot serialize")
        cluster = Cluster(apply_fn=_fake_apply(fail=True))
        with patch("cluster_installer.cluster.cluster.ClusterMetadata", return_value=broken):
            with caplog.at_level(logging.ERROR):
                with pytest.raises(ProvisioningError):
                    cluster.generate(_parents(make_spec()))
        assert "failed to marshal ClusterMetadata" in caplog.text

    def test_temp_dir_removal_failure(self):
        with patch(
            "cluster_installer.cluster.cluster.shutil.rmtree",
            side_effect=OSError("busy"),
        ):
            with pytest.raises(ResourceError, match="failed to remove temp dir"):
                Cluster(apply_fn=_fake_apply()).generate(_parents(make_spec()))


# ── TestLoad ─────────────────────────────────────────────────────────────


class TestLoad:
    def test_no_state_is_not_found(self, tmp_path):
        assert Cluster().load(DiskFileFetcher(tmp_path)) is False

    def test_existing_state_is_an_error(self, tmp_path):
        (tmp_path / STATE_FILE_NAME).write_bytes(b"{}")
        with pytest.raises(ClusterAlreadyExistsError, match="already be a running cluster"):
            Cluster().load(DiskFileFetcher(tmp_path))

    def test_store_refuses_to_relaunch(self, tmp_path):
        (tmp_path / STATE_FILE_NAME).write_bytes(b"{}")
        apply_fn = MagicMock()
        with pytest.raises(AssetError) as excinfo:
            AssetStore(tmp_path).fetch(Cluster(apply_fn=apply_fn))
        assert isinstance(excinfo.value.__cause__, ClusterAlreadyExistsError)
        apply_fn.assert_not_called()


# ── TestLoadMetadata ─────────────────────────────────────────────────────


class TestLoadMetadata:
    @pytest.mark.parametrize("platform", sorted(PLATFORMS))
    def test_round_trip(self, tmp_path, platform):
        cluster = Cluster(apply_fn=_fake_apply())
        cluster.generate(_parents(make_spec(PLATFORMS[platform])))
        write_files(cluster, tmp_path)

        loaded = load_metadata(tmp_path)
        assert loaded == cluster.metadata
        assert loaded.cluster_name == "mycluster"
        assert loaded.platform_name() == platform

    def test_missing_file(self, tmp_path):
        with pytest.raises(AssetError, match=f"failed to read {METADATA_FILE_NAME}"):
            load_metadata(tmp_path)

    def test_invalid_content(self, tmp_path):
        (tmp_path / METADATA_FILE_NAME).write_text("{not json", encoding="utf-8")
        with pytest.raises(AssetError, match="failed to parse"):
            load_metadata(tmp_path)

    def test_two_platforms_rejected(self, tmp_path):
        (tmp_path / METADATA_FILE_NAME).write_text(
            json.dumps(
                {
                    "ClusterName": "c",
                    "ClusterPlatformMetadata": {
                        "AWS": {"Region": "r", "Identifier": []},
                        "Libvirt": {"URI": "qemu:///system"},
                    },
                }
            ),
            encoding="utf-8",
        )
        with pytest.raises(AssetError):
            load_metadata(tmp_path)

    def test_unset_platforms_omitted(self):
        record = ClusterMetadata(cluster_name="c")
        assert json.loads(record.to_json()) == {
            "ClusterName": "c",
            "ClusterPlatformMetadata": {},
        }


# ── TestEndToEnd ─────────────────────────────────────────────────────────


class TestEndToEnd:
    def test_store_resolves_cluster_from_disk_inputs(self, tmp_path):
        spec = make_spec()
        seed = InstallConfig.from_spec(spec)
        write_files(seed, tmp_path)
        (tmp_path / "auth").mkdir()
        (tmp_path / ADMIN_KUBECONFIG_PATH).write_bytes(b"kubeconfig")

        cluster = Cluster(apply_fn=_fake_apply())
        AssetStore(tmp_path).fetch(cluster)

        assert (tmp_path / INSTALL_CONFIG_FILENAME).exists()
        assert STATE_FILE_NAME in _by_name(cluster)

    def test_missing_kubeconfig_fails_before_apply(self, tmp_path):
        write_files(InstallConfig.from_spec(make_spec()), tmp_path)
        apply_fn = MagicMock()
        with pytest.raises(AssetError, match="Kubeconfig Admin"):
            AssetStore(tmp_path).fetch(Cluster(apply_fn=apply_fn))
        apply_fn.assert_not_called()
