"""Terraform invocation for infrastructure provisioning."""

from cluster_installer.terraform.runner import (
    STATE_FILE_NAME,
    VARIABLES_FILE_NAME,
    TerraformError,
    TerraformResult,
    apply,
)

__all__ = [
    "STATE_FILE_NAME",
    "TerraformError",
    "TerraformResult",
    "VARIABLES_FILE_NAME",
    "apply",
]
