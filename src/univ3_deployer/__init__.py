from .checksum_cache import get_checksum_address
from .config import settings
from .connection import connect, connection_manager, get_web3, set_web3
from .version import __version__

# isort: split

from .anvil import AnvilNode
from .artifacts import ContractArtifact, get_contract_factory, link_bytecode, load_artifact
from .deployment import DeploymentResult, deploy_contract
from .logging import logger
from .transaction import get_signers, send_transaction, signer_address
from .uniswap import (
    PoolSnapshot,
    SwapResult,
    UniswapV3Deployment,
    approve,
    deploy_position_manager,
    deploy_uniswap_v3,
    exact_input_single,
    inspect_pool,
    token_balance,
    wrap_ether,
)

__all__ = (
    "AnvilNode",
    "ContractArtifact",
    "DeploymentResult",
    "PoolSnapshot",
    "SwapResult",
    "UniswapV3Deployment",
    "__version__",
    "approve",
    "connect",
    "connection_manager",
    "deploy_contract",
    "deploy_position_manager",
    "deploy_uniswap_v3",
    "exact_input_single",
    "get_checksum_address",
    "get_contract_factory",
    "get_signers",
    "get_web3",
    "inspect_pool",
    "link_bytecode",
    "load_artifact",
    "logger",
    "send_transaction",
    "set_web3",
    "settings",
    "signer_address",
    "token_balance",
    "wrap_ether",
)
