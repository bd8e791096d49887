from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: loading and merging configuration sources
(defaults, persistent storage and CLI overrides), logging bootstrap, driver
construction and execution. Returns the exit status chosen from the
driver's final BuildResult.
"""

import json
import os
import sys
from typing import Any, Dict, List, Optional

from hearth.core.driver import Core
from hearth.core.validator import validate_config
from hearth.domain.config import get_config_path, get_default_config, load_config, save_config
from hearth.domain.constants import EXIT_SUCCESS, EXIT_USAGE_ERROR
from hearth.domain.errors import InvalidArgumentError, InvalidConfigurationError
from hearth.infra.logging import LoggingConfig, configure_logging, get_logger
from hearth.interface.cli import args as cli_args
from hearth.interface.cli.output import ConsoleOutput

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None, output: Any = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv[1:].
        output: Optional output sink; a rich console sink is used otherwise.

    Returns:
        int: Process exit code (0 success, 1 failed build, 2 usage error).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Resolve base configuration (Default vs Persistent state)
    base_conf = get_default_config() if args.use_defaults else load_config()

    # 3. Map, merge and validate command-line overrides
    overrides = cli_args.args_to_overrides(args)
    conf, warnings = validate_config(_merge_config(base_conf, overrides), strict=False)

    # 4. Logging bootstrap (console on stderr, optional rotating file)
    configure_logging(LoggingConfig.from_config(conf))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    # Short-circuit if configuration dump is requested
    if args.dump_config:
        print(json.dumps(conf, ensure_ascii=False, indent=2))
        return EXIT_SUCCESS

    if args.save_config:
        if not save_config(conf):
            print(f"ERROR: could not write {get_config_path()}", file=sys.stderr)
            return EXIT_USAGE_ERROR
        print(f"Configuration saved to {get_config_path()}")
        return EXIT_SUCCESS

    # 5. Driver execution phase
    arguments = [parser.prog]
    if args.target is not None:
        arguments.append(args.target)

    try:
        core = build_core(conf, arguments, output if output is not None else ConsoleOutput())
        result = core.run().close()
    except (InvalidConfigurationError, InvalidArgumentError) as e:
        logger.error(f"Invalid configuration: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    logger.debug(f"Run finished (failed={result.failed}).")
    return result.exit_code


def build_core(conf: Dict[str, Any], arguments: List[str], output: Any) -> Core:
    """
    Construct a configured driver.

    The working directory is always the first search location, followed by
    the configured ones in order.
    """
    return (
        Core()
        .set_arguments(arguments)
        .set_directory_separator(os.sep)
        .set_output(output)
        .set_initial_manifest_path(conf["manifest_name"])
        .set_banner_style(conf["banner_style"])
        .set_failure_style(conf["failure_style"])
        .add_locations(os.getcwd())
        .add_locations(conf["locations"])
    )

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge CLI overrides into the base configuration.

    Scalars are replaced; CLI locations take priority over configured ones.
    """
    out = dict(base)
    for k, v in overrides.items():
        if v is None:
            continue
        if k == "locations":
            configured = base.get("locations") or []
            if isinstance(configured, list):
                v = list(v) + [loc for loc in configured if loc not in v]
        out[k] = v
    return out


if __name__ == "__main__":
    sys.exit(main())
