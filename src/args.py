"""Argument parsing functionality for dotnet-package-versions."""

import argparse
from constants import Constants


def _positive_int(value):
    ivalue = int(value)
    if ivalue < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return ivalue


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="dotnet-package-versions",
        description=(
            "Resolve the LTS and Current package graphs for the .NET seed "
            "packages and export the package versions"
        ),
        add_help=True,
    )

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help=f"Path to output file (default: {Constants.OUTPUT_FILE})",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (csv or json). If not specified, inferred from --output extension; defaults to csv.",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_FORMATS)

    parser.add_argument("-p", "--package",
                        dest="PACKAGES",
                        help="Add a seed package id (can be used multiple times)",
                        action="append",
                        type=str,
                        default=[])
    parser.add_argument("--only-packages",
                        dest="ONLY_PACKAGES",
                        help="Use only the seed packages given with --package",
                        action="store_true")
    parser.add_argument("--skip-restore",
                        dest="SKIP_RESTORE",
                        help="Only query the registry; do not restore package graphs.",
                        action="store_true")
    parser.add_argument("--restore-command",
                        dest="RESTORE_COMMAND",
                        help=f"Executable used to restore manifests (default: {Constants.RESTORE_COMMAND})",
                        action="store",
                        type=str)
    parser.add_argument("--registry-url",
                        dest="REGISTRY_URL",
                        help="NuGet V3 service index URL",
                        action="store",
                        type=str)
    parser.add_argument("--batch-size",
                        dest="BATCH_SIZE",
                        help=f"Maximum concurrent registry lookups (default: {Constants.LOOKUP_BATCH_SIZE})",
                        action="store",
                        type=_positive_int)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $PKGVERSIONS_LOG_LEVEL or INFO)",
                        action="store",
                        type=str,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
