"""Exception types raised across registry lookup, restore and export."""


class PackageVersionsError(Exception):
    """Base class for errors raised by this tool."""


class RegistryError(PackageVersionsError):
    """Raised when a registry version lookup fails."""


class ManifestError(PackageVersionsError):
    """Raised when a track manifest cannot be synthesized."""


class RestoreError(PackageVersionsError):
    """Raised when the restore tool exits non-zero or produces no graph."""


class GraphParseError(PackageVersionsError):
    """Raised when the resolved graph document is malformed."""


class ConfigError(PackageVersionsError):
    """Raised when a configuration file cannot be loaded or is invalid."""
