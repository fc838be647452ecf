"""Batched registry lookups populating seed packages with Current/LTS versions."""
from __future__ import annotations

import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterator, List, Optional, Sequence

from constants import Constants
from errors import RegistryError
from common.logging_utils import extra_context, is_debug_enabled, Timer
from versioning.models import Catalog, Package, Track
from versioning.selector import SelectableVersion, select_versions

from .client import fetch_stable_versions, resolve_registration_base

logger = logging.getLogger(__name__)

VersionFetcher = Callable[[str], Sequence[SelectableVersion]]


def _batches(items: Sequence[Package], size: int) -> Iterator[List[Package]]:
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def _apply_versions(package: Package, versions: Sequence[SelectableVersion]) -> None:
    if not versions:
        logger.warning("%s has no stable versions", package.id)
        return
    current, lts = select_versions(versions)
    package.set_version(Track.LTS, lts)
    package.set_version(Track.CURRENT, current)
    logger.info("%s : (LTS) %s, (Current) %s", package.id, lts, current)


def _registry_fetcher() -> VersionFetcher:
    """Bind the registry lookup to a registration base resolved once per run."""
    registration_base = resolve_registration_base()
    return functools.partial(fetch_stable_versions, registration_base=registration_base)


def populate_versions(
    catalog: Catalog,
    fetch: Optional[VersionFetcher] = None,
    batch_size: Optional[int] = None,
) -> None:
    """Look up registry versions for every catalog entry, in parallel batches.

    Each batch runs up to ``batch_size`` lookups concurrently and completes
    before the next one starts. A failed lookup is logged and leaves the
    package without versions; siblings are unaffected. With the default
    registry fetcher the service index is read once, before the first batch;
    if that fails every package is left without versions.

    Args:
        catalog: Catalog whose entries are populated in place
        fetch: Callable returning stable versions for a package id
        batch_size: Max concurrent lookups (defaults to Constants.LOOKUP_BATCH_SIZE)
    """
    size = max(1, batch_size or Constants.LOOKUP_BATCH_SIZE)
    packages = catalog.values()
    if not packages:
        return

    if fetch is None:
        try:
            fetch = _registry_fetcher()
        except RegistryError as exc:
            for package in packages:
                logger.error("Failed to get versions for %s: %s", package.id, exc)
            return

    with Timer() as t:
        for batch in _batches(packages, size):
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = []
                for package in batch:
                    logger.info("Get versions for %s", package.id)
                    futures.append((package, executor.submit(fetch, package.id)))
                # Results are applied on this thread once the batch is done
                for package, future in futures:
                    try:
                        versions = future.result()
                    except Exception as exc:  # pylint: disable=broad-exception-caught
                        logger.error("Failed to get versions for %s: %s", package.id, exc)
                        continue
                    _apply_versions(package, versions)

    if is_debug_enabled(logger):
        logger.debug(
            "Registry lookups finished",
            extra=extra_context(
                event="function_exit",
                component="lookup",
                action="populate_versions",
                count=len(packages),
                duration_ms=t.duration_ms(),
            ),
        )
