"""The asset contract: artifacts, assets and the parent set.

An :class:`Asset` is a named unit of work.  It declares the assets it
needs (:meth:`Asset.dependencies`), receives their resolved instances as a
:class:`Parents` mapping, and produces :class:`Artifact` files.  On a later
run :meth:`Asset.load` may rebuild the same file list from disk so the
asset does not have to be generated again.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, List, Tuple, Type, TypeVar

from cluster_installer.asset.errors import AssetError

if TYPE_CHECKING:
    from cluster_installer.asset.fetcher import FileFetcher

logger = logging.getLogger(__name__)

A = TypeVar("A", bound="Asset")


# ---------------------------------------------------------------------------
# Artifact
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Artifact:
    """An immutable output file, relative to the asset directory."""

    filename: str
    data: bytes

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)


# ---------------------------------------------------------------------------
# Asset
# ---------------------------------------------------------------------------


class Asset(abc.ABC):
    """Base class for every node in the asset graph.

    The asset's class is its identity: two instances of the same class are
    the same node.  Subclasses set :attr:`name` and implement
    :meth:`dependencies` and :meth:`generate`.  Assets that persist files
    override :meth:`files` and :meth:`load`.
    """

    #: Human-friendly name used in logs and error messages.
    name: str = ""

    @abc.abstractmethod
    def dependencies(self) -> List["Asset"]:
        """Return fresh instances of the assets this one needs, in order."""

    @abc.abstractmethod
    def generate(self, parents: "Parents") -> None:
        """Produce this asset's output from its resolved *parents*."""

    def files(self) -> List[Artifact]:
        """Return the files this asset produced (none by default)."""
        return []

    def load(self, fetcher: "FileFetcher") -> bool:
        """Rebuild this asset from disk.

        Returns ``True`` when the asset was fully reconstructed, ``False``
        when it is absent.  Never reconstructs partially.
        """
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"


# ---------------------------------------------------------------------------
# Parent set
# ---------------------------------------------------------------------------


class Parents(Mapping):
    """Read-only mapping of asset class to its resolved instance."""

    def __init__(self, resolved: Dict[Type[Asset], Asset]) -> None:
        self._resolved = dict(resolved)

    def __getitem__(self, key: Type[A]) -> A:
        try:
            return self._resolved[key]  # type: ignore[return-value]
        except KeyError:
            raise AssetError(
                f"{key.__name__} is not among the resolved parents"
            ) from None

    def __contains__(self, key: object) -> bool:
        return key in self._resolved

    def get(self, key, default=None):
        return self._resolved.get(key, default)

    def __iter__(self) -> Iterator[Type[Asset]]:
        return iter(self._resolved)

    def __len__(self) -> int:
        return len(self._resolved)

    def get_all(self, *keys: Type[Asset]) -> Tuple[Asset, ...]:
        """Return the resolved instances for *keys*, in the order given."""
        return tuple(self[k] for k in keys)


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def write_files(asset: Asset, directory: str | Path) -> List[Path]:
    """Write every file of *asset* below *directory*; return written paths."""
    root = Path(directory)
    written: List[Path] = []
    for artifact in asset.files():
        dest = root / artifact.filename
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(artifact.data)
        written.append(dest)
    logger.debug("Wrote %d file(s) for %s to %s", len(written), asset.name, root)
    return written
