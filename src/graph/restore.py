"""Restore-tool invocation and resolved-graph parsing.

``restore_workspace`` scopes a uniquely named temporary directory that is
removed on every exit path. ``run_restore`` blocks on the external restore
process and returns the resolved graph document it produced.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import shutil
import subprocess
import tempfile
from typing import Iterator, List, Optional, Tuple

from constants import Constants
from errors import GraphParseError, RestoreError
from common.logging_utils import extra_context, is_debug_enabled, Timer

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def restore_workspace() -> Iterator[str]:
    """Yield a fresh temporary directory and remove it with its contents on exit."""
    path = tempfile.mkdtemp(prefix=Constants.TEMP_DIR_PREFIX)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)
        logger.debug("Removed restore workspace %s", path)


def assets_path(manifest_path: str) -> str:
    """Location of the resolved graph written by restore for ``manifest_path``."""
    return os.path.join(os.path.dirname(manifest_path), *Constants.ASSETS_FILE_PARTS)


def run_restore(manifest_path: str, command: Optional[str] = None) -> str:
    """Run ``<command> restore <manifest_path>`` and return the resolved graph text.

    The call blocks until the process exits; no timeout is applied.

    Raises:
        RestoreError: If the tool cannot be started, exits non-zero, or
            leaves no resolved graph behind.
    """
    cmd = [command or Constants.RESTORE_COMMAND, "restore", manifest_path]
    logger.info("Running %s", " ".join(cmd))
    with Timer() as t:
        try:
            result = subprocess.run(cmd, check=False)
        except OSError as exc:
            raise RestoreError(f"Failed to start restore tool '{cmd[0]}': {exc}") from exc

    if is_debug_enabled(logger):
        logger.debug(
            "Restore finished",
            extra=extra_context(
                event="subprocess_exit",
                component="restore",
                action="restore",
                outcome="success" if result.returncode == 0 else "failure",
                returncode=result.returncode,
                duration_ms=t.duration_ms(),
            ),
        )

    graph_path = assets_path(manifest_path)
    if result.returncode != 0 or not os.path.isfile(graph_path):
        raise RestoreError(
            f"Failed to generate package graph: restore exited with {result.returncode}"
        )
    with open(graph_path, encoding="utf-8") as fh:
        return fh.read()


def parse_resolved_graph(text: str) -> List[Tuple[str, str]]:
    """Parse the ``libraries`` section of a resolved graph into (id, version) pairs.

    Keys have the form ``<packageId>/<version>``.

    Raises:
        GraphParseError: If the document or any library key is malformed.
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GraphParseError(f"Resolved graph is not valid JSON: {exc}") from exc
    libraries = document.get("libraries") if isinstance(document, dict) else None
    if not isinstance(libraries, dict):
        raise GraphParseError("Resolved graph has no 'libraries' section")

    pairs: List[Tuple[str, str]] = []
    for key in libraries:
        package_id, sep, version = key.partition("/")
        if not sep or not package_id or not version:
            raise GraphParseError(f"Malformed library key '{key}'")
        pairs.append((package_id, version))
    return pairs
