"""CLI entry point for cluster-installer.

Usage::

    cluster-installer create manifests --dir ./mycluster
    cluster-installer create cluster --dir ./mycluster
    cluster-installer metadata --dir ./mycluster --json
"""

from __future__ import annotations

import functools
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, Optional

import typer

from cluster_installer import ui
from cluster_installer.asset import (
    Asset,
    AssetError,
    AssetStore,
    ClusterAlreadyExistsError,
    find_cause,
    write_files,
)
from cluster_installer.cluster import Cluster, TerraformVariables, load_metadata
from cluster_installer.config import InstallerSettings
from cluster_installer.installconfig import InstallConfig
from cluster_installer.manifests import Tectonic
from cluster_installer.terraform import runner as terraform

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ASSET_FAILURE = 1
EXIT_CLUSTER_EXISTS = 2
EXIT_USAGE = 3

app = typer.Typer(
    name="cluster-installer",
    help="Generate cluster assets and launch clusters with Terraform.",
    no_args_is_help=True,
)


def _targets(settings: InstallerSettings) -> Dict[str, Callable[[], Asset]]:
    return {
        "install-config": InstallConfig,
        "terraform-variables": TerraformVariables,
        "manifests": Tectonic,
        "cluster": lambda: Cluster(
            apply_fn=functools.partial(terraform.apply, settings=settings)
        ),
    }


def _persist(asset: Asset, directory: Path) -> None:
    written = write_files(asset, directory)
    ui.files_table(
        asset.name,
        ((str(p.relative_to(directory)), p.stat().st_size) for p in written),
    )


# ── create command ───────────────────────────────────────────────────────────


@app.command()
def create(
    target: str = typer.Argument(
        ...,
        help="Asset to create: install-config, terraform-variables, manifests, cluster.",
    ),
    directory: Optional[Path] = typer.Option(
        None,
        "--dir",
        help="Asset directory. Defaults to CLUSTER_INSTALLER_DIR or '.'.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Resolve TARGET and everything it depends on, then write its files."""
    if debug:
        logging.basicConfig(level=logging.DEBUG)

    settings = InstallerSettings.from_env(asset_dir=directory)
    factory = _targets(settings).get(target)
    if factory is None:
        ui.fail(f"Unknown target {target!r}")
        raise typer.Exit(EXIT_USAGE)

    asset_dir = settings.asset_dir
    asset_dir.mkdir(parents=True, exist_ok=True)
    asset = factory()

    ui.step(f"Creating {asset.name} in {asset_dir} ...")
    try:
        AssetStore(asset_dir).fetch(asset)
    except AssetError as exc:
        if asset.files():
            # A failed apply may still have produced state worth keeping.
            _persist(asset, asset_dir)
        ui.error_panel(f"{asset.name} failed", str(exc))
        if find_cause(exc, ClusterAlreadyExistsError) is not None:
            raise typer.Exit(EXIT_CLUSTER_EXISTS) from exc
        raise typer.Exit(EXIT_ASSET_FAILURE) from exc

    _persist(asset, asset_dir)
    ui.ok(f"{asset.name} created.")
    raise typer.Exit(EXIT_SUCCESS)


# ── metadata command ─────────────────────────────────────────────────────────


@app.command()
def metadata(
    directory: Optional[Path] = typer.Option(
        None, "--dir", help="Asset directory holding metadata.json."
    ),
    json_flag: bool = typer.Option(False, "--json", "-j", help="Output as JSON."),
) -> None:
    """Show the metadata record of a launched cluster."""
    settings = InstallerSettings.from_env(asset_dir=directory)
    try:
        record = load_metadata(settings.asset_dir)
    except AssetError as exc:
        ui.fail(str(exc))
        raise typer.Exit(EXIT_ASSET_FAILURE) from exc

    if json_flag:
        ui.console.print_json(record.to_json().decode("utf-8"))
        raise typer.Exit(EXIT_SUCCESS)

    ui.detail("Cluster", record.cluster_name)
    ui.detail("Platform", record.platform_name() or "(none)")
    raise typer.Exit(EXIT_SUCCESS)


# ── Entry point ──────────────────────────────────────────────────────────────


def main() -> int:
    """Run the CLI and return an exit code."""
    try:
        app()
        return 0
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
