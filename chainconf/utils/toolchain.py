import copy
import os
import re
from types import MappingProxyType
from typing import Mapping

from .common import load_config, mask_text
from .constants import (
    CONFIG_TOP_LEVEL_KEYS,
    DEFAULT_COMPILER_VERSION,
    DEFAULT_NETWORK,
    DEFAULT_NETWORKS,
    DEFAULT_OPTIMIZER_ENABLED,
    DEFAULT_OPTIMIZER_RUNS,
    DEFAULT_PLUGINS,
    ETHERSCAN_API_KEY_ENV_VAR,
    HARDHAT_NETWORK,
    KNOWN_PLUGINS,
    OUTPUT_SELECTION,
)
from .custom_exceptions import ConfigError, CredentialsError
from .custom_types import Config, NetworkDescriptor, OptimizerSettings, ToolchainConfig

COMPILER_VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+(\+commit\.[0-9a-f]{8})?$")
NETWORK_KEYS = {"url", "accounts_env_vars"}


def _expect_mapping(value, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f'"{where}" must be a mapping, got {type(value).__name__}')
    return value


def _expect_env_var_names(value, where: str) -> list[str]:
    if not isinstance(value, list):
        raise ConfigError(f'"{where}" must be a list of env var names')
    for name in value:
        if not isinstance(name, str) or not name:
            raise ConfigError(f'"{where}" contains a bad env var name: {name!r}')
    return value


def _parse_compiler(solidity: dict) -> tuple[str, OptimizerSettings]:
    version = solidity.get("version", DEFAULT_COMPILER_VERSION)
    if not isinstance(version, str) or not COMPILER_VERSION_PATTERN.match(version):
        raise ConfigError(f'"solidity.version" is not a compiler release: {version!r}')

    optimizer = _expect_mapping(solidity.get("optimizer"), "solidity.optimizer")
    enabled = optimizer.get("enabled", DEFAULT_OPTIMIZER_ENABLED)
    runs = optimizer.get("runs", DEFAULT_OPTIMIZER_RUNS)
    if not isinstance(enabled, bool):
        raise ConfigError(f'"solidity.optimizer.enabled" must be a bool: {enabled!r}')
    # bool is an int subclass
    if isinstance(runs, bool) or not isinstance(runs, int) or runs < 1:
        raise ConfigError(
            f'"solidity.optimizer.runs" must be a positive integer: {runs!r}'
        )

    return version, OptimizerSettings(enabled=enabled, runs=runs)


def _build_network(name, network: dict, environ: Mapping[str, str]) -> NetworkDescriptor:
    if not isinstance(name, str):
        raise ConfigError(
            f"network name {name!r} was parsed as {type(name).__name__}, quote it"
        )
    network = _expect_mapping(network, f"networks.{name}")

    unknown_keys = set(network) - NETWORK_KEYS
    if unknown_keys:
        raise ConfigError(
            f"unknown keys in networks.{name}: {sorted(map(str, unknown_keys))}"
        )

    url = network.get("url")
    if url is not None and (not isinstance(url, str) or not url):
        raise ConfigError(f'"networks.{name}.url" must be a non-empty string')

    env_vars = _expect_env_var_names(
        network.get("accounts_env_vars", []), f"networks.{name}.accounts_env_vars"
    )
    # unset keys stay as None placeholders until something signs with them
    accounts = tuple(environ.get(env_var) or None for env_var in env_vars)

    return NetworkDescriptor(
        url=url, accounts=accounts, accounts_env_vars=tuple(env_vars)
    )


def _parse_networks(
    networks_config: dict, environ: Mapping[str, str]
) -> Mapping[str, NetworkDescriptor]:
    merged = dict(DEFAULT_NETWORKS)
    merged.update(networks_config)
    networks = {
        name: _build_network(name, network, environ)
        for name, network in merged.items()
    }
    return MappingProxyType(networks)


def _parse_plugins(plugins) -> tuple[str, ...]:
    if plugins is None:
        return DEFAULT_PLUGINS
    if not isinstance(plugins, list) or not all(
        isinstance(plugin, str) for plugin in plugins
    ):
        raise ConfigError('"plugins" must be a list of plugin names')
    return tuple(dict.fromkeys(plugins))


def build_toolchain_config(
    overrides: Config, environ: Mapping[str, str], strict: bool = False
) -> ToolchainConfig:
    overrides = _expect_mapping(overrides, "<root>")
    unknown_keys = set(overrides) - CONFIG_TOP_LEVEL_KEYS
    if unknown_keys:
        raise ConfigError(f"unknown top-level keys: {sorted(map(str, unknown_keys))}")

    compiler_version, optimizer = _parse_compiler(
        _expect_mapping(overrides.get("solidity"), "solidity")
    )
    networks = _parse_networks(
        _expect_mapping(overrides.get("networks"), "networks"), environ
    )

    default_network = overrides.get("default_network", DEFAULT_NETWORK)
    if not isinstance(default_network, str) or default_network not in networks:
        raise ConfigError(
            f'"default_network" is not a configured network: {default_network!r}'
        )

    etherscan = _expect_mapping(overrides.get("etherscan"), "etherscan")
    api_key_env_var = etherscan.get("api_key_env_var", ETHERSCAN_API_KEY_ENV_VAR)
    if not isinstance(api_key_env_var, str) or not api_key_env_var:
        raise ConfigError('"etherscan.api_key_env_var" must be an env var name')

    config = ToolchainConfig(
        compiler_version=compiler_version,
        optimizer=optimizer,
        networks=networks,
        explorer_api_key=environ.get(api_key_env_var) or None,
        plugins=_parse_plugins(overrides.get("plugins")),
        default_network=default_network,
    )

    if strict:
        for name, network in config.networks.items():
            if network.accounts_env_vars:
                require_signing_credentials(config, name)

    return config


def load_toolchain_config(
    config_path: str | None = None,
    environ: Mapping[str, str] | None = None,
    strict: bool = False,
) -> ToolchainConfig:
    """
    Assemble the toolchain config from defaults, an optional override file and the environment.

    Missing secrets do not fail the load unless `strict` is set. A missing
    deployer key stays in the account sequence as a None placeholder.

    Args:
        config_path: Optional YAML or JSON override file
        environ: Environment to read secrets from, defaults to os.environ
        strict: Check every network's signing credentials right away

    Returns:
        The immutable ToolchainConfig

    Raises:
        ConfigError: If the override file is malformed
        CredentialsError: If `strict` is set and a signing key is absent
    """
    environ = os.environ if environ is None else environ
    overrides = load_config(config_path) if config_path else {}
    return build_toolchain_config(overrides, environ, strict)


def require_signing_credentials(
    config: ToolchainConfig, network_name: str
) -> tuple[str, ...]:
    if network_name not in config.networks:
        raise CredentialsError(f'unknown network "{network_name}"')

    network = config.networks[network_name]
    if network_name == HARDHAT_NETWORK and not network.accounts_env_vars:
        # the in-process network funds its own accounts
        return ()
    if not network.accounts_env_vars:
        raise CredentialsError(f'network "{network_name}" declares no accounts')

    for env_var, account in zip(network.accounts_env_vars, network.accounts):
        if not account:
            raise CredentialsError(
                f'{env_var} is not set for network "{network_name}"'
            )
    return network.accounts


def missing_credentials(config: ToolchainConfig) -> dict[str, list[str]]:
    missing = {}
    for name, network in config.networks.items():
        unset = [
            env_var
            for env_var, account in zip(network.accounts_env_vars, network.accounts)
            if not account
        ]
        if unset:
            missing[name] = unset
    return missing


def _secret(value: str | None, reveal_secrets: bool) -> str | None:
    if value is None or reveal_secrets:
        return value
    return mask_text(value)


def solc_settings(config: ToolchainConfig) -> dict:
    return {
        "optimizer": {
            "enabled": config.optimizer.enabled,
            "runs": config.optimizer.runs,
        },
        "outputSelection": copy.deepcopy(OUTPUT_SELECTION),
    }


def to_toolchain_dict(config: ToolchainConfig, reveal_secrets: bool = False) -> dict:
    networks = {}
    for name, network in config.networks.items():
        descriptor = {}
        if network.url is not None:
            descriptor["url"] = network.url
        if network.accounts_env_vars:
            descriptor["accounts"] = [
                _secret(account, reveal_secrets) for account in network.accounts
            ]
        networks[name] = descriptor

    return {
        "solidity": {
            "version": config.compiler_version,
            "settings": {
                "optimizer": {
                    "enabled": config.optimizer.enabled,
                    "runs": config.optimizer.runs,
                },
            },
        },
        "defaultNetwork": config.default_network,
        "networks": networks,
        "etherscan": {"apiKey": _secret(config.explorer_api_key, reveal_secrets)},
        "plugins": [KNOWN_PLUGINS.get(plugin, plugin) for plugin in config.plugins],
    }
