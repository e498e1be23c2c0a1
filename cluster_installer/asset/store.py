"""Memoized, depth-first resolution of the asset graph.

For every requested asset the store:

1. returns the memoized instance if this asset class was already resolved;
2. otherwise asks the asset to :meth:`~Asset.load` itself from disk and, on
   a hit, stops there without touching its dependencies;
3. on a miss, resolves each declared dependency left to right, builds the
   :class:`Parents` mapping and calls :meth:`~Asset.generate`.

The first failing dependency aborts the dependent asset; its error is
wrapped with the dependent's name on the way up.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Type, TypeVar

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.asset.errors import AssetError, DependencyCycleError
from cluster_installer.asset.fetcher import DiskFileFetcher, FileFetcher

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=Asset)


class AssetStore:
    """Resolve assets against an asset directory."""

    def __init__(
        self,
        directory: str | Path = ".",
        *,
        fetcher: Optional[FileFetcher] = None,
    ) -> None:
        self.directory = Path(directory)
        self.fetcher: FileFetcher = fetcher or DiskFileFetcher(self.directory)
        self._resolved: Dict[Type[Asset], Asset] = {}
        self._in_progress: List[Asset] = []

    # -- public API ---------------------------------------------------------

    def put(self, asset: Asset) -> None:
        """Seed the store with an already-resolved *asset*."""
        self._resolved[type(asset)] = asset

    def fetch(self, asset: A) -> A:
        """Return the resolved instance for *asset*'s class."""
        key = type(asset)
        cached = self._resolved.get(key)
        if cached is not None:
            logger.debug("Reusing resolved asset %s", asset.name)
            return cached  # type: ignore[return-value]

        if any(type(a) is key for a in self._in_progress):
            start = next(
                i for i, a in enumerate(self._in_progress) if type(a) is key
            )
            path = [a.name for a in self._in_progress[start:]] + [asset.name]
            raise DependencyCycleError(path)

        self._in_progress.append(asset)
        try:
            self._resolve_node(asset)
        finally:
            self._in_progress.pop()

        self._resolved[key] = asset
        return asset

    def resolve(self, asset: Asset) -> List[Artifact]:
        """Resolve *asset* and return the files it produced."""
        return list(self.fetch(asset).files())

    # -- internals ----------------------------------------------------------

    def _resolve_node(self, asset: Asset) -> None:
        try:
            found = asset.load(self.fetcher)
        except Exception as exc:
            raise AssetError(
                f'failed to load asset "{asset.name}": {exc}'
            ) from exc

        if found:
            logger.info("Loaded %s from %s", asset.name, self.directory)
            return

        resolved: Dict[Type[Asset], Asset] = {}
        for dep in asset.dependencies():
            try:
                resolved[type(dep)] = self.fetch(dep)
            except DependencyCycleError:
                raise
            except Exception as exc:
                raise AssetError(
                    f'failed to fetch dependency of "{asset.name}": {exc}'
                ) from exc

        logger.debug("Generating %s", asset.name)
        try:
            asset.generate(Parents(resolved))
        except Exception as exc:
            raise AssetError(
                f'failed to generate asset "{asset.name}": {exc}'
            ) from exc
