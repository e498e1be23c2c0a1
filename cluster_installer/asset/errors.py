"""Exception taxonomy for asset resolution and generation.

Every error carries the operation and the asset or file it concerns.
"Not found" is deliberately absent: :meth:`Asset.load` reports a cache miss
by returning ``False``, never by raising.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Type

logger = logging.getLogger(__name__)


class AssetError(Exception):
    """Base class for every asset failure."""


class ConfigurationError(AssetError):
    """The install configuration cannot drive the requested asset."""


class ResourceError(AssetError):
    """A local resource (temp dir, file) could not be acquired or released."""


class ProvisioningError(AssetError):
    """The infrastructure provisioning tool failed."""


class ClusterAlreadyExistsError(AssetError):
    """A previous run left a Terraform state file behind."""


class MissingAssetError(AssetError):
    """An asset must be supplied by the user and was not found on disk."""


class DependencyCycleError(AssetError):
    """Declared dependencies form a cycle."""

    def __init__(self, path: List[str]) -> None:
        self.path = list(path)
        super().__init__(
            "dependency cycle detected: " + " -> ".join(f'"{p}"' for p in path)
        )


def wrap(
    cause: BaseException,
    message: str,
    cls: Type[AssetError] = AssetError,
) -> AssetError:
    """Return ``cls("<message>: <cause>")`` chained to *cause*, unraised."""
    err = cls(f"{message}: {cause}")
    err.__cause__ = cause
    return err


# ---------------------------------------------------------------------------
# First-error accumulator
# ---------------------------------------------------------------------------


class ErrorAccumulator:
    """Collect errors from a chain of best-effort steps.

    The first recorded error claims the slot and is the one raised by
    :meth:`raise_first`; every later error is logged and dropped.
    """

    def __init__(self) -> None:
        self._first: Optional[BaseException] = None

    def record(self, exc: BaseException) -> None:
        if self._first is None:
            self._first = exc
        else:
            logger.error("%s", exc)

    def raise_first(self) -> None:
        if self._first is not None:
            raise self._first


def find_cause(
    exc: Optional[BaseException], cls: Type[BaseException]
) -> Optional[BaseException]:
    """Walk the ``__cause__`` chain of *exc* and return the first *cls*."""
    while exc is not None:
        if isinstance(exc, cls):
            return exc
        exc = exc.__cause__
    return None
