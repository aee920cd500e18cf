"""Command line entrypoint: `ikesu check`."""

import argparse
import sys

from loguru import logger

from ikesu import __version__
from ikesu.config import AppConfig
from ikesu.inspection.application.diagnostics import render_provider_listing
from ikesu.inspection.domain.catalog import InspectionMetricCatalog
from ikesu.inspection.domain.exceptions import ConfigurationError, IkesuError
from ikesu.inspection.infrastructure.container import init_container
from ikesu.inspection.infrastructure.logging import configure_logging
from ikesu.inspection.infrastructure.rule_loader import load_check_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ikesu",
        description='Manage the health condition of the fish in the "Ikesu".',
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--apikey", help="Mackerel API key (env: MACKEREL_APIKEY, IKESU_MACKEREL_APIKEY)")
    parser.add_argument("--apibase", help="Mackerel API base URL (env: MACKEREL_APIBASE, IKESU_MACKEREL_APIBASE)")
    parser.add_argument("--log", help="Path to the log file. If not specified, the log is written to stdout.")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warn", "error"],
        help="Log level (env: IKESU_LOG_LEVEL, default: info)",
    )

    subcommands = parser.add_subparsers(dest="command", required=True)
    check = subcommands.add_parser(
        "check",
        help="Detects disruptions in posted metrics and notifies the host as a CRITICAL alert.",
    )
    check.add_argument("-c", "--config", help="Path or URI of the configuration file (env: IKESU_CHECK_CONFIG)")
    check.add_argument(
        "--show-providers",
        action="store_true",
        help="List the inspection metric names corresponding to the provider for each integration.",
    )
    check.add_argument(
        "--dry-run",
        action="store_true",
        help="Only a simplified display of the check results is performed, and no alerts are issued.",
    )
    check.set_defaults(func=run_check)
    return parser


def build_app_config(args: argparse.Namespace) -> AppConfig:
    """Environment configuration with command line flags taking precedence."""
    config = AppConfig()

    mackerel_overrides = {"apikey": args.apikey, "apibase": args.apibase}
    logging_overrides = {"file": args.log, "level": args.log_level}
    inspection_overrides = {"check_config": getattr(args, "config", None)}

    return config.model_copy(
        update={
            "mackerel": config.mackerel.model_copy(update={k: v for k, v in mackerel_overrides.items() if v}),
            "logging": config.logging.model_copy(update={k: v for k, v in logging_overrides.items() if v}),
            "inspection": config.inspection.model_copy(update={k: v for k, v in inspection_overrides.items() if v}),
        }
    )


def run_check(args: argparse.Namespace) -> int:
    if args.show_providers:
        print(render_provider_listing(InspectionMetricCatalog()))
        return 0

    config = build_app_config(args)
    try:
        configure_logging(config.logging.level, config.logging.file, config.logging.serialize)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    if not config.mackerel.apikey:
        raise ConfigurationError("The Mackerel API key is not specified (--apikey or MACKEREL_APIKEY).")

    container = init_container(config)
    check_config = load_check_config(config.inspection.check_config, container.rule_loaders())

    logger.info(f"Run command (version={__version__})")
    logger.debug(f"Config: {check_config.model_dump(mode='json')}")

    client = container.mackerel_client()
    try:
        container.check_use_case(dry_run=args.dry_run).run(check_config)
    finally:
        client.close()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except IkesuError as e:
        print(e.message, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
