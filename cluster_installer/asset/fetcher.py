"""Disk access for :meth:`Asset.load`.

The fetcher is the only way an asset reads previously written output.
A missing file raises :class:`FileNotFoundError` so callers can tell a
cache miss apart from any other I/O failure.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Protocol

from cluster_installer.asset.base import Artifact


class FileFetcher(Protocol):
    def fetch_by_name(self, name: str) -> Artifact:
        """Return the file *name*; raise :class:`FileNotFoundError` if absent."""

    def fetch_by_pattern(self, pattern: str) -> List[Artifact]:
        """Return every file matching the glob *pattern*, sorted by name."""


class DiskFileFetcher:
    """:class:`FileFetcher` rooted at an asset directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def fetch_by_name(self, name: str) -> Artifact:
        data = (self.directory / name).read_bytes()
        return Artifact(filename=name, data=data)

    def fetch_by_pattern(self, pattern: str) -> List[Artifact]:
        matches = sorted(p for p in self.directory.glob(pattern) if p.is_file())
        return [
            Artifact(
                filename=p.relative_to(self.directory).as_posix(),
                data=p.read_bytes(),
            )
            for p in matches
        ]
