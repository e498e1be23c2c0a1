"""Assets whose content is supplied by the user rather than generated."""

from __future__ import annotations

import logging
from typing import ClassVar, List, Tuple

from cluster_installer.asset.base import Artifact, Asset, Parents
from cluster_installer.asset.errors import MissingAssetError
from cluster_installer.asset.fetcher import FileFetcher

logger = logging.getLogger(__name__)


class ProvidedAsset(Asset):
    """An asset made of fixed files that must already exist on disk.

    :meth:`load` succeeds only when every file in :attr:`filenames` is
    present; a partial set counts as absent.  :meth:`generate` always
    fails, naming the files the user has to provide.
    """

    filenames: ClassVar[Tuple[str, ...]] = ()

    def __init__(self) -> None:
        self.file_list: List[Artifact] = []

    def dependencies(self) -> List[Asset]:
        return []

    def generate(self, parents: Parents) -> None:
        raise MissingAssetError(
            f"{self.name} is not generated by this installer; "
            f"provide {', '.join(self.filenames)} in the asset directory"
        )

    def files(self) -> List[Artifact]:
        return self.file_list

    def load(self, fetcher: FileFetcher) -> bool:
        found: List[Artifact] = []
        for filename in self.filenames:
            try:
                found.append(fetcher.fetch_by_name(filename))
            except FileNotFoundError:
                if found:
                    logger.warning(
                        "%s is incomplete on disk: %s is missing",
                        self.name,
                        filename,
                    )
                return False
        self.file_list = found
        return True
