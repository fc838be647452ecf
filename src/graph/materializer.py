"""Materialize transitive package graphs per version track into the catalog."""
from __future__ import annotations

import functools
import logging
import os
from typing import Callable, Iterable, Optional

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import Catalog, Track

from .manifest import build_manifest
from .restore import parse_resolved_graph, restore_workspace, run_restore

logger = logging.getLogger(__name__)

RestoreRunner = Callable[[str], str]

# LTS is resolved before Current
TRACK_ORDER = (Track.LTS, Track.CURRENT)


def materialize(
    catalog: Catalog,
    track: Track,
    *,
    restore: Optional[RestoreRunner] = None,
    restore_command: Optional[str] = None,
    runtime_package_id: Optional[str] = None,
) -> None:
    """Restore the ``track`` manifest and merge every resolved package into ``catalog``.

    Restore results overwrite registry-derived versions for ``track``; packages
    not yet in the catalog are added with only ``track`` set.

    Args:
        catalog: Catalog mutated in place
        track: Track being materialized
        restore: Callable taking a manifest path and returning the resolved
            graph text; defaults to running the restore tool
        restore_command: Executable used by the default restore runner
        runtime_package_id: Package whose version sets the target framework

    Raises:
        ManifestError, RestoreError, GraphParseError: All fatal for the run.
    """
    manifest = build_manifest(catalog, track, runtime_package_id)
    runner = restore or functools.partial(run_restore, command=restore_command)

    logger.info("Generating %s package graph", track.value)
    with restore_workspace() as workdir:
        manifest_path = os.path.join(workdir, Constants.MANIFEST_FILE)
        with open(manifest_path, "w", encoding="utf-8") as fh:
            fh.write(manifest)
        graph_text = runner(manifest_path)

    resolved = parse_resolved_graph(graph_text)
    added = 0
    for package_id, version in resolved:
        if package_id not in catalog:
            added += 1
        catalog.record(package_id, track, version)

    logger.info(
        "Resolved %d packages for %s (%d new)", len(resolved), track.value, added
    )
    if is_debug_enabled(logger):
        logger.debug(
            "Graph merged",
            extra=extra_context(
                event="function_exit",
                component="materializer",
                action="materialize",
                track=track.value,
                count=len(resolved),
                outcome="success",
            ),
        )


def generate_package_graphs(
    catalog: Catalog,
    tracks: Iterable[Track] = TRACK_ORDER,
    **kwargs,
) -> None:
    """Materialize each track in turn; the first failure aborts the rest."""
    for track in tracks:
        materialize(catalog, track, **kwargs)
