"""Version tracks, package catalog and version selection."""
