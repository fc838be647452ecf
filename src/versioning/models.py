"""Data models for package version tracks and the package catalog."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional

import semantic_version


class Track(Enum):
    """Version tracks resolved for the seed packages."""
    CURRENT = "current"
    LTS = "lts"

    @property
    def attribute(self) -> str:
        """Name of the Package field holding this track's version."""
        return f"{self.value}_version"


@dataclass
class Package:
    """Known version information for one package id."""
    id: str
    current_version: Optional[str] = None
    lts_version: Optional[str] = None

    def version_for(self, track: Track) -> Optional[str]:
        """Return the version recorded for ``track`` or None."""
        return getattr(self, track.attribute)

    def set_version(self, track: Track, version: Optional[str]) -> None:
        """Record ``version`` for ``track``."""
        setattr(self, track.attribute, version)


@dataclass(frozen=True)
class RegistryVersion:
    """A version as published by the registry together with its parsed form.

    Ordering uses the parsed components; ``str()`` returns the registry
    string unchanged, so four-part versions such as ``4.0.0.1`` survive
    selection, manifest pinning and export.
    """
    raw: str
    parsed: semantic_version.Version

    @property
    def major(self) -> int:
        return self.parsed.major

    @property
    def minor(self) -> int:
        return self.parsed.minor

    @property
    def patch(self) -> int:
        return self.parsed.patch

    @property
    def prerelease(self):
        return self.parsed.prerelease

    def __str__(self) -> str:
        return self.raw


class Catalog:
    """Accumulating mapping from package id to Package.

    Single-owner; grows monotonically and never drops entries.
    """

    def __init__(self) -> None:
        self._packages: Dict[str, Package] = {}

    @classmethod
    def from_seeds(cls, seed_ids: Iterable[str]) -> "Catalog":
        """Create a catalog with one empty Package per distinct seed id."""
        catalog = cls()
        for seed_id in seed_ids:
            if seed_id not in catalog:
                catalog.add(Package(id=seed_id))
        return catalog

    def add(self, package: Package) -> None:
        """Insert or replace the entry for ``package.id``."""
        self._packages[package.id] = package

    def get(self, package_id: str) -> Optional[Package]:
        return self._packages.get(package_id)

    def record(self, package_id: str, track: Track, version: str) -> Package:
        """Set ``track``'s version for ``package_id``, creating the entry if needed."""
        package = self._packages.get(package_id)
        if package is None:
            package = Package(id=package_id)
            self._packages[package_id] = package
        package.set_version(track, version)
        return package

    def values(self) -> List[Package]:
        return list(self._packages.values())

    def __contains__(self, package_id: object) -> bool:
        return package_id in self._packages

    def __getitem__(self, package_id: str) -> Package:
        return self._packages[package_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)
