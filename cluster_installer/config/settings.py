"""Installer settings, resolved from the environment.

Precedence for every field: explicit keyword → environment variable →
built-in default.

- ``CLUSTER_INSTALLER_DIR`` → ``asset_dir`` (default ``.``)
- ``CLUSTER_INSTALLER_TERRAFORM_BIN`` → ``terraform_bin`` (default ``terraform``)
- ``CLUSTER_INSTALLER_TERRAFORM_DATA_DIR`` → ``terraform_data_dir`` (default ``data/terraform``)
- ``CLUSTER_INSTALLER_TERRAFORM_TIMEOUT`` → ``terraform_timeout`` (default: no timeout)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "CLUSTER_INSTALLER_"


class InstallerSettings(BaseModel):
    asset_dir: Path = Field(default=Path("."))
    terraform_bin: str = "terraform"
    terraform_data_dir: Path = Field(default=Path("data") / "terraform")
    #: Seconds before a running ``terraform`` is killed; ``None`` waits forever.
    terraform_timeout: Optional[float] = None

    @field_validator("terraform_timeout", mode="before")
    @classmethod
    def _empty_timeout(cls, value: Any) -> Any:
        if value in ("", "0", 0):
            return None
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> "InstallerSettings":
        """Build settings from ``CLUSTER_INSTALLER_*`` env vars and *overrides*."""
        values: dict = {}
        for field_name in cls.model_fields:
            env_val = os.environ.get(ENV_PREFIX + field_name.upper())
            if env_val is not None:
                values[field_name] = env_val
        # ``asset_dir`` is read from the shorter CLUSTER_INSTALLER_DIR.
        dir_val = os.environ.get(ENV_PREFIX + "DIR")
        if dir_val:
            values["asset_dir"] = dir_val
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
