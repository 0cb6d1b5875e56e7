from dataclasses import dataclass
from typing import cast

from eth_abi.exceptions import DecodingError
from eth_typing import ChecksumAddress
from web3 import Web3
from web3.exceptions import ContractLogicError

from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.connection import get_web3
from univ3_deployer.exceptions import PoolError
from univ3_deployer.functions import encode_function_calldata, raw_call
from univ3_deployer.logging import logger
from univ3_deployer.types import BlockNumber

SLOT0_STRUCT_TYPES = [
    "uint160",
    "int24",
    "uint16",
    "uint16",
    "uint16",
    "uint8",
    "bool",
]


@dataclass(slots=True, frozen=True)
class PoolSnapshot:
    address: ChecksumAddress
    block_number: BlockNumber
    sqrt_price_x96: int
    tick: int
    liquidity: int
    token0: ChecksumAddress
    token1: ChecksumAddress
    balance0: int
    balance1: int


def inspect_pool(
    pool: str,
    *,
    w3: Web3 | None = None,
    block_number: BlockNumber | None = None,
) -> PoolSnapshot:
    """
    Read the price, tick, liquidity and token balances of a Uniswap V3 pool. All values are read at
    the same block, the latest unless given.
    """

    if w3 is None:
        w3 = get_web3()
    if block_number is None:
        block_number = w3.eth.get_block_number()

    pool_address = get_checksum_address(pool)

    try:
        sqrt_price_x96, tick, *_ = raw_call(
            w3=w3,
            address=pool_address,
            calldata=encode_function_calldata(
                function_prototype="slot0()",
                function_arguments=None,
            ),
            return_types=SLOT0_STRUCT_TYPES,
            block_identifier=block_number,
        )
        liquidity, token0, token1 = (
            raw_call(
                w3=w3,
                address=pool_address,
                calldata=encode_function_calldata(
                    function_prototype=function_prototype,
                    function_arguments=None,
                ),
                return_types=[return_type],
                block_identifier=block_number,
            )[0]
            for function_prototype, return_type in (
                ("liquidity()", "uint128"),
                ("token0()", "address"),
                ("token1()", "address"),
            )
        )
        balance0, balance1 = (
            raw_call(
                w3=w3,
                address=get_checksum_address(token),
                calldata=encode_function_calldata(
                    function_prototype="balanceOf(address)",
                    function_arguments=[pool_address],
                ),
                return_types=["uint256"],
                block_identifier=block_number,
            )[0]
            for token in (token0, token1)
        )
    except (ContractLogicError, DecodingError) as exc:
        raise PoolError(message=f"Could not read pool state at {pool_address}") from exc

    snapshot = PoolSnapshot(
        address=pool_address,
        block_number=block_number,
        sqrt_price_x96=cast("int", sqrt_price_x96),
        tick=cast("int", tick),
        liquidity=cast("int", liquidity),
        token0=get_checksum_address(token0),
        token1=get_checksum_address(token1),
        balance0=cast("int", balance0),
        balance1=cast("int", balance1),
    )
    logger.debug(snapshot)
    return snapshot
