from .deployments import (
    UniswapV3Deployment,
    deploy_position_manager,
    deploy_uniswap_v3,
)
from .erc20 import approve, token_balance, wrap_ether
from .router import SwapResult, exact_input_single
from .v3_pool import PoolSnapshot, inspect_pool

__all__ = (
    "PoolSnapshot",
    "SwapResult",
    "UniswapV3Deployment",
    "approve",
    "deploy_position_manager",
    "deploy_uniswap_v3",
    "exact_input_single",
    "inspect_pool",
    "token_balance",
    "wrap_ether",
)
