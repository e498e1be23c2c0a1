"""Shared fixtures: install configs for each supported platform."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from cluster_installer.installconfig import InstallConfig, InstallConfigSpec


def make_spec(platform: Dict[str, Any] | None = None, **overrides: Any) -> InstallConfigSpec:
    raw: Dict[str, Any] = {
        "metadata": {"name": "mycluster"},
        "clusterID": "abc123",
        "baseDomain": "example.com",
        "pullSecret": '{"auths": {"quay.io": {"auth": "Zm9vOmJhcg=="}}}',
        "platform": platform if platform is not None else {"aws": {"region": "us-east-1"}},
    }
    raw.update(overrides)
    return InstallConfigSpec.model_validate(raw)


PLATFORMS = {
    "aws": {"aws": {"region": "us-east-1"}},
    "openstack": {"openstack": {"region": "RegionOne", "cloud": "mycloud"}},
    "libvirt": {"libvirt": {"URI": "qemu+tcp://192.168.122.1/system"}},
}


@pytest.fixture
def aws_spec() -> InstallConfigSpec:
    return make_spec(PLATFORMS["aws"])


@pytest.fixture
def aws_install_config(aws_spec) -> InstallConfig:
    return InstallConfig.from_spec(aws_spec)


@pytest.fixture
def spec_factory():
    """Return :func:`make_spec` for tests that need custom configs."""
    return make_spec
