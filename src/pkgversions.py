"""dotnet-package-versions - LTS/Current package graph exporter

    Queries the NuGet registry for the seed packages, restores the LTS and
    Current package graphs and exports every resolved package version.

    Returns:
        int: Exit code
"""
import csv
import json
import logging
import sys

from constants import Constants, ExitCodes, OutputFormats
from errors import ConfigError, GraphParseError, ManifestError, RestoreError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import apply_overrides
from versioning.models import Catalog
from registry.nuget import populate_versions
from graph import generate_package_graphs

logger = logging.getLogger(__name__)


def export_csv(packages, path):
    """Exports the package versions to a CSV file.

    Args:
        packages (list): List of Package instances.
        path (str): File path to export the CSV.
    """
    rows = [Constants.CSV_HEADERS]

    def _nv(v):
        return "" if v is None else v

    for x in packages:
        rows.append([x.id, _nv(x.lts_version), _nv(x.current_version)])
    try:
        with open(path, 'w', newline='', encoding='utf-8') as file:
            export = csv.writer(file)
            export.writerows(rows)
        logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_json(packages, path):
    """Exports the package versions to a JSON file.

    Args:
        packages (list): List of Package instances.
        path (str): File path to export the JSON.
    """
    data = []
    for x in packages:
        data.append({
            "id": x.id,
            "ltsVersion": x.lts_version,
            "currentVersion": x.current_version,
        })
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def _output_format(args, path):
    """Explicit --format wins, then the output extension; csv by default."""
    if getattr(args, "OUTPUT_FORMAT", None):
        return args.OUTPUT_FORMAT.lower()
    if path.lower().endswith(".json"):
        return OutputFormats.JSON.value
    return OutputFormats.CSV.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, getattr(args, "LOG_FILE", None))

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        apply_overrides(args)
    except ConfigError as e:
        logging.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    catalog = Catalog.from_seeds(Constants.SEED_PACKAGES)
    if not catalog:
        logging.warning("No seed packages configured.")
        sys.exit(ExitCodes.SUCCESS.value)
    logging.info("Seed packages: %s", ", ".join(catalog))

    # QUERY: LTS and Current versions by convention
    populate_versions(catalog, batch_size=Constants.LOOKUP_BATCH_SIZE)

    # RESTORE: package graphs for LTS and Current
    if getattr(args, "SKIP_RESTORE", False):
        logging.info("Skipping package graph restore.")
    else:
        try:
            generate_package_graphs(
                catalog,
                restore_command=Constants.RESTORE_COMMAND,
                runtime_package_id=Constants.RUNTIME_PACKAGE_ID,
            )
        except (ManifestError, RestoreError, GraphParseError) as e:
            logging.error("%s", e)
            sys.exit(ExitCodes.RESTORE_ERROR.value)

    # OUTPUT
    path = Constants.OUTPUT_FILE
    if _output_format(args, path) == OutputFormats.JSON.value:
        export_json(catalog.values(), path)
    else:
        export_csv(catalog.values(), path)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI finished",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="main",
                outcome="success",
                count=len(catalog),
            )
        )
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
