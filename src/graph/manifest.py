"""Synthetic .csproj manifests pinning catalog packages for one version track."""
from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Optional

import semantic_version

from constants import Constants
from errors import ManifestError
from versioning.models import Catalog, Track

logger = logging.getLogger(__name__)


def target_framework(catalog: Catalog, track: Track, runtime_package_id: Optional[str] = None) -> str:
    """Derive the target framework moniker from the runtime package's version.

    ``3.1.2`` becomes ``netcoreapp3.1``.

    Raises:
        ManifestError: If the runtime package has no parseable version for ``track``.
    """
    runtime_id = runtime_package_id or Constants.RUNTIME_PACKAGE_ID
    runtime = catalog.get(runtime_id)
    version = runtime.version_for(track) if runtime else None
    if not version:
        raise ManifestError(f"No {track.value} version known for runtime package {runtime_id}")
    try:
        parsed = semantic_version.Version.coerce(version)
    except ValueError as exc:
        raise ManifestError(f"Invalid {runtime_id} version '{version}'") from exc
    return f"{Constants.TARGET_FRAMEWORK_PREFIX}{parsed.major}.{parsed.minor}"


def build_manifest(catalog: Catalog, track: Track, runtime_package_id: Optional[str] = None) -> str:
    """Render an SDK-style project referencing every package with a ``track`` version.

    Args:
        catalog: Package catalog
        track: Version track whose versions are pinned
        runtime_package_id: Package whose version determines the target framework

    Returns:
        The project document text.
    """
    framework = target_framework(catalog, track, runtime_package_id)

    project = ET.Element("Project", {"Sdk": Constants.MANIFEST_SDK})
    properties = ET.SubElement(project, "PropertyGroup")
    ET.SubElement(properties, "OutputType").text = Constants.MANIFEST_OUTPUT_TYPE
    ET.SubElement(properties, "TargetFramework").text = framework

    references = ET.SubElement(project, "ItemGroup")
    pinned = 0
    for package in catalog.values():
        version = package.version_for(track)
        if not version:
            continue
        ET.SubElement(references, "PackageReference", {"Include": package.id, "Version": version})
        pinned += 1

    logger.debug("Manifest for %s pins %d packages (%s)", track.value, pinned, framework)
    ET.indent(project, space="  ")
    return ET.tostring(project, encoding="unicode") + "\n"
