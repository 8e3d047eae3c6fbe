import time

DIGEST_DIR = "digest"
START_TIME = time.time()
START_TIME_INT = int(START_TIME)
LOGS_PATH = f"{DIGEST_DIR}/{START_TIME_INT}/logs.txt"
DEFAULT_CONFIG_PATH = "chainconf.yaml"
DEFAULT_ENV_PATH = ".env"
DEFAULT_EXPORT_PATH = "chainconf.export.json"

DEPLOYER_PRIVATE_KEY_ENV_VAR = "DEPLOYER_PRIVATE_KEY"
ETHERSCAN_API_KEY_ENV_VAR = "ETHERSCAN_API_KEY"

DEFAULT_COMPILER_VERSION = "0.8.17"
DEFAULT_OPTIMIZER_ENABLED = True
DEFAULT_OPTIMIZER_RUNS = 200

HARDHAT_NETWORK = "hardhat"
DEFAULT_NETWORK = HARDHAT_NETWORK

# fmt: off
DEFAULT_NETWORKS = {
    HARDHAT_NETWORK: {},
    "mumbai": {
        "url": "https://matic-mumbai.chainstacklabs.com",
        "accounts_env_vars": [DEPLOYER_PRIVATE_KEY_ENV_VAR],
    },
}
# fmt: on

KNOWN_PLUGINS = {
    "hardhat-ethers": "@nomiclabs/hardhat-ethers",
    "hardhat-etherscan": "@nomiclabs/hardhat-etherscan",
    "hardhat-upgrades": "@openzeppelin/hardhat-upgrades",
    "hardhat-waffle": "@nomiclabs/hardhat-waffle",
}
DEFAULT_PLUGINS = (
    "hardhat-ethers",
    "hardhat-etherscan",
    "hardhat-upgrades",
    "hardhat-waffle",
)

CONFIG_TOP_LEVEL_KEYS = {
    "solidity",
    "default_network",
    "networks",
    "etherscan",
    "plugins",
}

OUTPUT_SELECTION = {
    "*": {
        "*": [
            "abi",
            "evm.bytecode",
            "evm.deployedBytecode",
            "evm.methodIdentifiers",
            "metadata",
        ],
        "": ["ast"],
    }
}

SOLC_LIST_URL = "https://raw.githubusercontent.com/ethereum/solc-bin/refs/heads/gh-pages/{platform}/list.json"

RPC_HEADERS = {"Content-Type": "application/json"}
REQUEST_TIMEOUT_SEC = 10
