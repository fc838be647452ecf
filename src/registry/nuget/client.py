"""NuGet registry client: list stable, listed versions via the V3 registration API."""
from __future__ import annotations

import logging
import urllib.parse
from typing import Any, Dict, List, Optional

from constants import Constants
from errors import RegistryError
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from versioning.models import RegistryVersion
from versioning.selector import parse_versions

import registry.nuget as nuget_pkg

logger = logging.getLogger(__name__)


def _fetch_v3_service_index(registry_url: Optional[str] = None) -> Dict[str, Any]:
    """Fetch and parse the NuGet V3 service index.

    Raises:
        RegistryError: If the index is unavailable.
    """
    url = registry_url or Constants.REGISTRY_URL_NUGET_V3
    status_code, data = nuget_pkg.get_json(url, context="nuget")
    if status_code != 200 or not isinstance(data, dict):
        raise RegistryError(f"NuGet service index unavailable ({status_code}): {safe_url(url)}")
    return data


def _get_v3_registration_base(service_index: Dict[str, Any]) -> str:
    """Get the registration base URL advertised by the service index.

    Raises:
        RegistryError: If the index advertises no registration resource.
    """
    for resource in service_index.get("resources", []):
        if resource.get("@type") == Constants.REGISTRATION_RESOURCE_TYPE:
            base_url = resource.get("@id")
            if base_url:
                if not base_url.endswith("/"):
                    base_url += "/"
                return base_url
    raise RegistryError("NuGet service index has no registration resource")


def _get_v3_registration_url(package_id: str, registration_base: str) -> str:
    """Get the registration index URL for ``package_id`` under ``registration_base``."""
    encoded_id = urllib.parse.quote(package_id.lower(), safe="")
    return f"{registration_base}{encoded_id}/index.json"


def resolve_registration_base(registry_url: Optional[str] = None) -> str:
    """Fetch the service index once and return its registration base URL.

    Raises:
        RegistryError: If the index is unavailable or lacks the resource.
    """
    return _get_v3_registration_base(_fetch_v3_service_index(registry_url))


def _iter_page_items(page: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the leaf items of a registration page, fetching it when not inlined."""
    items = page.get("items")
    if items is not None:
        return items
    page_url = page.get("@id")
    if not page_url:
        return []
    status_code, data = nuget_pkg.get_json(page_url, context="nuget")
    if status_code != 200 or not isinstance(data, dict):
        raise RegistryError(f"NuGet registration page unavailable ({status_code}): {safe_url(page_url)}")
    return data.get("items", [])


def _collect_listed_versions(registration: Dict[str, Any]) -> List[str]:
    """Collect version strings of listed catalog entries across all pages."""
    versions: List[str] = []
    for page in registration.get("items", []):
        for leaf in _iter_page_items(page):
            catalog_entry = leaf.get("catalogEntry", {})
            version = catalog_entry.get("version")
            if not version:
                continue
            # Entries without a "listed" flag are listed
            if catalog_entry.get("listed", True) is False:
                continue
            versions.append(version)
    return versions


def fetch_stable_versions(
    package_id: str,
    registry_url: Optional[str] = None,
    registration_base: Optional[str] = None,
) -> List[RegistryVersion]:
    """List the stable, listed versions of a NuGet package.

    Args:
        package_id: Package identifier
        registry_url: Optional V3 service index URL override
        registration_base: Registration base URL already resolved from the
            service index; the index is fetched when omitted

    Returns:
        Stable versions as published; empty when the package is unknown to the registry.

    Raises:
        RegistryError: On transport errors or unexpected registry responses.
    """
    if registration_base is None:
        registration_base = resolve_registration_base(registry_url)
    registration_url = _get_v3_registration_url(package_id, registration_base)

    status_code, registration = nuget_pkg.get_json(registration_url, context="nuget")
    if status_code == 404:
        logger.debug("Package %s not found in NuGet registry", package_id)
        return []
    if status_code != 200 or not isinstance(registration, dict):
        raise RegistryError(f"NuGet registration lookup failed with status {status_code}")

    raw_versions = _collect_listed_versions(registration)
    versions = parse_versions(raw_versions)
    if is_debug_enabled(logger):
        logger.debug(
            "NuGet versions fetched",
            extra=extra_context(
                event="package_found",
                component="client",
                action="fetch_versions",
                outcome="success",
                package_manager="nuget",
                target=package_id,
                count=len(versions),
            ),
        )
    return versions
