from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict

from hearth import __version__

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the Hearth CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="hearth",
        description="Resolve a target from the project manifest and run it. "
                    "Without a target, list every available target.",
    )

    p.add_argument(
        "target",
        nargs="?",
        default=None,
        help="Slash-delimited target path, e.g. 'group/target'.",
    )

    # --- Resolution ---
    p.add_argument(
        "-m", "--manifest",
        dest="manifest_name",
        default=None,
        help="Manifest file name looked up in the working directory (default: .hearth.yml).",
    )
    p.add_argument(
        "-L", "--location",
        dest="locations",
        action="append",
        default=None,
        help="Additional search location; may be repeated. Searched in the order given.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the persisted configuration file.",
    )
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the effective configuration as the new defaults and exit.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Write diagnostic logs to this file.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options actually given on the command line are included.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.manifest_name:
        overrides["manifest_name"] = args.manifest_name
    if args.locations:
        overrides["locations"] = list(args.locations)
    if args.log_file:
        overrides["log_file"] = args.log_file
    if args.debug:
        overrides["log_level"] = "DEBUG"

    return overrides
