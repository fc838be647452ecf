"""NuGet registry package.

This package provides NuGet registry support:
- client.py: version listing through the NuGet V3 registration API
- lookup.py: batched, failure-isolated version lookups for catalog entries
"""

# Patch points exposed for tests (e.g., monkeypatch in tests)
from common.http_client import get_json  # noqa: F401

# Public API re-exports
from .client import fetch_stable_versions  # noqa: F401
from .lookup import populate_versions  # noqa: F401

__all__ = [
    "fetch_stable_versions",
    "populate_versions",
    # Patch points for tests
    "get_json",
]
