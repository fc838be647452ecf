"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    RESTORE_ERROR = 4


class OutputFormats(Enum):
    """Output formats supported by the exporter.

    Args:
        Enum (string): Output formats supported by the exporter.
    """

    CSV = "csv"
    JSON = "json"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL_NUGET_V3 = "https://api.nuget.org/v3/index.json"
    REGISTRATION_RESOURCE_TYPE = "RegistrationsBaseUrl/3.6.0"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests

    SEED_PACKAGES = [
        "Microsoft.NETCore.App",
        "Microsoft.AspNetCore",
        "Microsoft.AspNetCore.Mvc",
        "Microsoft.AspNetCore.Identity.EntityFrameworkCore",
        "Microsoft.AspNetCore.Authentication.OpenIdConnect",
        "Microsoft.EntityFrameworkCore.SqlServer",
    ]
    RUNTIME_PACKAGE_ID = "Microsoft.NETCore.App"
    TARGET_FRAMEWORK_PREFIX = "netcoreapp"
    LOOKUP_BATCH_SIZE = 20

    RESTORE_COMMAND = "dotnet"
    TEMP_DIR_PREFIX = "pkgversions-"
    MANIFEST_FILE = "temp.csproj"
    ASSETS_FILE_PARTS = ("obj", "project.assets.json")
    MANIFEST_SDK = "Microsoft.NET.Sdk"
    MANIFEST_OUTPUT_TYPE = "Exe"

    OUTPUT_FILE = "dotnet_supported_package_versions.csv"
    CSV_HEADERS = ["Id", "LtsVersion", "CurrentVersion"]
    SUPPORTED_FORMATS = [OutputFormats.CSV.value, OutputFormats.JSON.value]

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "PKGVERSIONS_LOG_LEVEL"
    ENV_RESTORE_COMMAND = "PKGVERSIONS_RESTORE_COMMAND"
    ENV_REGISTRY_URL = "PKGVERSIONS_REGISTRY_URL"
