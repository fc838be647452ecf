"""Current/LTS version selection over a package's stable versions.

Current is the highest (major, minor, patch). LTS is the highest
(major, patch) among versions whose minor component is zero, falling back
to Current when there is no such version.
"""

import logging
from typing import Iterable, List, Sequence, Tuple, Union

import semantic_version

from versioning.models import RegistryVersion

logger = logging.getLogger(__name__)

# Parsed semver or a registry version that keeps its published string
SelectableVersion = Union[semantic_version.Version, RegistryVersion]


def _version_from_str(v: str):
    """Leniently parse a NuGet version string; None when unparseable."""
    try:
        return semantic_version.Version.coerce(v.strip())
    except ValueError:
        return None


def parse_versions(candidates: Iterable[str]) -> List[RegistryVersion]:
    """Parse raw version strings, dropping invalid entries and prereleases.

    Each kept entry retains the registry string as published.
    """
    stable: List[RegistryVersion] = []
    for raw in candidates:
        ver = _version_from_str(raw)
        if ver is None:
            logger.debug("Skipping unparseable version %r", raw)
            continue
        if ver.prerelease:
            continue
        stable.append(RegistryVersion(raw=raw.strip(), parsed=ver))
    return stable


def pick_current(versions: Sequence[SelectableVersion]) -> SelectableVersion:
    """Return the version with the greatest (major, minor, patch) tuple.

    Ties keep input order under a stable sort and the last one wins.
    """
    if not versions:
        raise ValueError("No versions to select from")
    ordered = sorted(versions, key=lambda ver: (ver.major, ver.minor, ver.patch))
    return ordered[-1]


def pick_lts(versions: Sequence[SelectableVersion]) -> SelectableVersion:
    """Return the greatest (major, patch) version with minor == 0, else Current."""
    if not versions:
        raise ValueError("No versions to select from")
    candidates = [ver for ver in versions if ver.minor == 0]
    if not candidates:
        return pick_current(versions)
    ordered = sorted(candidates, key=lambda ver: (ver.major, ver.patch))
    return ordered[-1]


def select_versions(versions: Iterable[SelectableVersion]) -> Tuple[str, str]:
    """Select the (current, lts) version strings from stable ``versions``.

    Registry versions are returned as published, e.g. ``4.0.0.1``.

    Raises:
        ValueError: If ``versions`` is empty.
    """
    versions = list(versions)
    return str(pick_current(versions)), str(pick_lts(versions))
