"""Package graph materialization.

- manifest.py: synthetic project manifest per version track
- restore.py: temporary restore workspace, restore invocation, graph parsing
- materializer.py: merges resolved graphs into the catalog
"""

from .manifest import build_manifest, target_framework  # noqa: F401
from .restore import parse_resolved_graph, restore_workspace, run_restore  # noqa: F401
from .materializer import generate_package_graphs, materialize  # noqa: F401

__all__ = [
    "build_manifest",
    "target_framework",
    "parse_resolved_graph",
    "restore_workspace",
    "run_restore",
    "generate_package_graphs",
    "materialize",
]
