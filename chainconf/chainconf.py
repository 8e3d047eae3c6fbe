import argparse
import os
import sys
import time

import yaml
from dotenv import load_dotenv

from .utils.common import mask_text
from .utils.compiler import get_compiler_build
from .utils.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_ENV_PATH,
    DEFAULT_EXPORT_PATH,
    START_TIME,
)
from .utils.custom_exceptions import BaseCustomException, ExceptionHandler
from .utils.custom_types import ToolchainConfig
from .utils.helpers import write_json
from .utils.logger import logger
from .utils.node_handler import get_chain_id
from .utils.plugins import register_plugins
from .utils.toolchain import (
    load_toolchain_config,
    missing_credentials,
    require_signing_credentials,
    to_toolchain_dict,
)

__version__ = "0.1.0"


def networks_report(config: ToolchainConfig) -> list[list]:
    missing = missing_credentials(config)
    report = []
    for index, (name, network) in enumerate(config.networks.items()):
        if not network.accounts_env_vars:
            status = "n/a"
        elif name in missing:
            status = "missing"
        else:
            status = "set"
        report.append(
            [
                index + 1,
                name,
                network.url or "-",
                len(network.accounts),
                status,
            ]
        )
    return report


def show_config(config: ToolchainConfig) -> None:
    logger.okay("Compiler version", config.compiler_version)
    logger.okay(
        "Optimizer",
        f"enabled={config.optimizer.enabled}, runs={config.optimizer.runs}",
    )
    logger.okay("Default network", config.default_network)
    if config.explorer_api_key:
        logger.okay("Explorer API key", mask_text(config.explorer_api_key))
    else:
        logger.warn("Explorer API key isn't set, contract verification will fail")

    for name, env_vars in missing_credentials(config).items():
        logger.warn(f'Signing keys not set for "{name}"', ", ".join(env_vars))

    logger.divider()
    logger.networks_table(networks_report(config))


def check_config(
    config: ToolchainConfig,
    network_name: str | None = None,
    ping: bool = False,
    check_compiler: bool = False,
) -> int:
    if network_name is not None:
        network_names = [network_name]
    else:
        network_names = [
            name for name, network in config.networks.items() if network.url
        ]

    failures = 0
    for name in network_names:
        logger.info("Checking network", name)
        try:
            accounts = require_signing_credentials(config, name)
            logger.okay(f'Signing keys for "{name}"', len(accounts))
            url = config.networks[name].url
            if ping and url:
                get_chain_id(url)
        except BaseCustomException as custom_exc:
            failures += 1
            ExceptionHandler.raise_exception_or_log(custom_exc)

    if check_compiler:
        try:
            get_compiler_build(config.compiler_version)
        except BaseCustomException as custom_exc:
            failures += 1
            ExceptionHandler.raise_exception_or_log(custom_exc)

    return failures


def export_config(
    config: ToolchainConfig, output_path: str, reveal_secrets: bool = False
) -> dict:
    exported = to_toolchain_dict(config, reveal_secrets=reveal_secrets)
    write_json(output_path, exported)
    if reveal_secrets:
        logger.warn("Exported config contains plain secrets", output_path)
    else:
        logger.okay("Exported config", output_path)
    return exported


def process_config(args) -> int:
    config_path = args.config
    if config_path is None and os.path.isfile(DEFAULT_CONFIG_PATH):
        config_path = DEFAULT_CONFIG_PATH

    if config_path is not None:
        logger.info(f"Loading config {config_path}...")
    else:
        logger.info("No config file given, using built-in defaults")

    config = load_toolchain_config(config_path, strict=args.strict)
    register_plugins(config)
    logger.divider()

    if args.command == "check":
        ExceptionHandler.initialize(not args.keep_going)
        return check_config(config, args.network, args.ping, args.compiler)
    if args.command == "export":
        export_config(config, args.output, args.reveal_secrets)
        return 0

    show_config(config)
    return 0


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(prog="chainconf")
    parser.add_argument(
        "--version", "-V", action="store_true", help="Display version information"
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help=f"Path to a YAML or JSON override file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument(
        "--env-file",
        default=DEFAULT_ENV_PATH,
        help="Path to a dotenv file, existing env vars take precedence",
    )
    parser.add_argument(
        "--strict",
        help="Fail at load time if any declared signing key is not set",
        action="store_true",
    )

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("show", help="Show the resolved config (default)")

    check_parser = subparsers.add_parser(
        "check", help="Check credentials before running a deployment"
    )
    check_parser.add_argument(
        "--network", "-n", default=None, help="Network to check (default: all with a URL)"
    )
    check_parser.add_argument(
        "--ping", help="Query eth_chainId on every checked endpoint", action="store_true"
    )
    check_parser.add_argument(
        "--compiler",
        help="Make sure the compiler release exists in solc-bin",
        action="store_true",
    )
    check_parser.add_argument(
        "--keep-going",
        "-K",
        help="Log failures and continue instead of stopping at the first one",
        action="store_true",
    )

    export_parser = subparsers.add_parser(
        "export", help="Write the config in the toolchain's JSON shape"
    )
    export_parser.add_argument(
        "--output", "-o", default=DEFAULT_EXPORT_PATH, help="Output JSON path"
    )
    export_parser.add_argument(
        "--reveal-secrets",
        help="Write keys unmasked, only for handing the file to the toolchain",
        action="store_true",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    if args.version:
        print(f"chainconf {__version__}")
        return

    logger.info("Welcome to chainconf!")
    if load_dotenv(args.env_file):
        logger.info("Loaded env file", args.env_file)
    logger.divider()

    try:
        failures = process_config(args)
    except (BaseCustomException, ValueError, OSError, yaml.YAMLError) as err:
        logger.error(str(err))
        sys.exit(1)

    if failures:
        logger.error(f"Checks failed: {failures}")
        sys.exit(1)

    execution_time = time.time() - START_TIME
    logger.okay(f"Done in {round(execution_time, 3)}s ✨")


if __name__ == "__main__":
    main()
