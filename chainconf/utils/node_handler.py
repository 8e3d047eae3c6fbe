import json

from .common import pull, mask_text
from .constants import RPC_HEADERS
from .logger import logger
from .custom_exceptions import NodeError


def get_chain_id(rpc_url: str) -> int:
    """
    Get the chain ID from an RPC node.

    Args:
        rpc_url: The RPC URL

    Returns:
        The chain ID as an integer

    Raises:
        NodeError: If the chain ID cannot be retrieved
    """
    logger.info(f'Receiving the chain ID from "{mask_text(rpc_url)}" ...')

    payload = json.dumps(
        {"id": 1, "jsonrpc": "2.0", "method": "eth_chainId", "params": []}
    )

    try:
        chain_id_response = pull(rpc_url, payload, RPC_HEADERS).json()
    except ValueError as json_err:
        raise NodeError(f"Response is not JSON: {json_err}")

    if not isinstance(chain_id_response, dict) or "result" not in chain_id_response:
        raise NodeError(f"Failed to retrieve chain ID: {chain_id_response}")

    try:
        chain_id = int(chain_id_response["result"], 16)
    except (TypeError, ValueError):
        raise NodeError(
            f"Chain ID is not a hex quantity: {chain_id_response['result']!r}"
        )

    logger.okay("Chain ID was successfully received", chain_id)
    return chain_id
