from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, TypedDict, NotRequired

from .constants import DEFAULT_NETWORK


class OptimizerConfig(TypedDict):
    enabled: NotRequired[bool]
    runs: NotRequired[int]


class SolidityConfig(TypedDict):
    version: NotRequired[str]
    optimizer: NotRequired[OptimizerConfig]


class NetworkConfig(TypedDict):
    url: NotRequired[str]
    accounts_env_vars: NotRequired[list[str]]


class EtherscanConfig(TypedDict):
    api_key_env_var: NotRequired[str]


class Config(TypedDict):
    solidity: NotRequired[SolidityConfig]
    default_network: NotRequired[str]
    networks: NotRequired[dict[str, NetworkConfig]]
    etherscan: NotRequired[EtherscanConfig]
    plugins: NotRequired[list[str]]


@dataclass(frozen=True)
class OptimizerSettings:
    enabled: bool
    runs: int


@dataclass(frozen=True)
class NetworkDescriptor:
    url: str | None = None
    accounts: tuple[str | None, ...] = ()
    accounts_env_vars: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.url is None and not self.accounts


@dataclass(frozen=True)
class ToolchainConfig:
    """
    Immutable toolchain settings assembled once per process.

    Attributes:
        compiler_version: Solidity compiler release, e.g. "0.8.17"
        optimizer: Optimizer switch and expected call frequency
        networks: Read-only mapping of network name to descriptor
        explorer_api_key: Verification service key, None when not set
        plugins: Extension modules to register with the toolchain
        default_network: Network used when none is given
    """

    compiler_version: str
    optimizer: OptimizerSettings
    networks: Mapping[str, NetworkDescriptor] = field(
        default_factory=lambda: MappingProxyType({})
    )
    explorer_api_key: str | None = None
    plugins: tuple[str, ...] = ()
    default_network: str = DEFAULT_NETWORK
