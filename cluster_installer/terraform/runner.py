"""Terraform CLI wrapper.

Wraps ``terraform init`` + ``terraform apply`` as blocking subprocesses so
the installer never reimplements provisioning.  :func:`apply` returns the
path of the state file; on failure it raises :class:`TerraformError`
carrying that same path, because a failed apply may still have created
resources and written state.
"""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from cluster_installer.config.settings import InstallerSettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

#: Name of the Terraform state file, inside the working directory and as
#: an artifact.
STATE_FILE_NAME: str = "terraform.tfstate"

#: Name of the Terraform variables file expected in the working directory.
VARIABLES_FILE_NAME: str = "terraform.tfvars"

# ---------------------------------------------------------------------------
# Result / error
# ---------------------------------------------------------------------------


@dataclass
class TerraformResult:
    """Outcome of one ``terraform`` invocation."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class TerraformError(RuntimeError):
    """A ``terraform`` invocation failed.

    ``state_file`` is the path where state may have been written, or
    ``None`` when terraform never ran.
    """

    def __init__(
        self,
        message: str,
        *,
        state_file: Optional[str] = None,
        result: Optional[TerraformResult] = None,
    ) -> None:
        super().__init__(message)
        self.state_file = state_file
        self.result = result


# ---------------------------------------------------------------------------
# Internal helper
# ---------------------------------------------------------------------------


def _run_terraform(
    args: List[str],
    *,
    cwd: str,
    terraform_bin: str = "terraform",
    timeout: Optional[float] = None,
) -> TerraformResult:
    """Run ``terraform`` with *args* in *cwd* and capture its output.

    Raises :class:`FileNotFoundError` when the binary is missing and
    :class:`subprocess.TimeoutExpired` when *timeout* elapses.
    """
    cmd = [terraform_bin, *args]
    env = {**os.environ, "TF_IN_AUTOMATION": "1"}

    logger.info("Running: %s", " ".join(cmd))
    proc = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        env=env,
        timeout=timeout,
    )
    result = TerraformResult(
        command=" ".join(cmd),
        returncode=proc.returncode,
        stdout=proc.stdout.strip(),
        stderr=proc.stderr.strip(),
    )
    if result.stdout:
        logger.debug("terraform stdout:\n%s", result.stdout)
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply(
    working_dir: str | Path,
    platform: str,
    *extra_args: str,
    settings: Optional[InstallerSettings] = None,
) -> str:
    """Initialise and apply the *platform* Terraform module in *working_dir*.

    *working_dir* must already contain :data:`VARIABLES_FILE_NAME`.  Blocks
    until ``terraform apply`` exits and returns the state file path.

    Raises
    ------
    TerraformError
        If the binary is missing or cannot be executed, times out, or
        exits non-zero.
    """
    settings = settings or InstallerSettings.from_env()
    working_dir = str(working_dir)
    state_file = os.path.join(working_dir, STATE_FILE_NAME)
    module_dir = Path(settings.terraform_data_dir).resolve() / platform

    steps = [
        [
            "init",
            "-input=false",
            "-no-color",
            f"-from-module={module_dir}",
        ],
        [
            "apply",
            "-auto-approve",
            "-input=false",
            "-no-color",
            f"-state={state_file}",
            f"-var-file={os.path.join(working_dir, VARIABLES_FILE_NAME)}",
            *extra_args,
        ],
    ]

    for args in steps:
        try:
            result = _run_terraform(
                args,
                cwd=working_dir,
                terraform_bin=settings.terraform_bin,
                timeout=settings.terraform_timeout,
            )
        except FileNotFoundError as exc:
            raise TerraformError(
                f"{settings.terraform_bin} CLI not found on PATH"
            ) from exc
        except OSError as exc:
            raise TerraformError(
                f"failed to execute {settings.terraform_bin}: {exc}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise TerraformError(
                f"terraform {args[0]} timed out after {exc.timeout}s",
                state_file=state_file,
            ) from exc

        if not result.success:
            logger.error(
                "terraform %s failed (rc=%d): %s",
                args[0],
                result.returncode,
                result.stderr or "(no stderr)",
            )
            raise TerraformError(
                f"failed to {args[0]} using terraform",
                state_file=state_file if args[0] == "apply" else None,
                result=result,
            )

    logger.info("Terraform apply complete: %s", state_file)
    return state_file
