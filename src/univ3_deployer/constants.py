__all__ = (
    "DEFAULT_POSITION_MANAGER_ARGS",
    "DEFAULT_SWAP_DEADLINE_SECONDS",
    "MAX_UINT256",
    "MIN_UINT256",
    "POO",
    "POO_WETH_POOL",
    "UNISWAP_V3_FACTORY",
    "WETH",
    "ZERO_ADDRESS",
)

import typing

from eth_typing import ChecksumAddress

from univ3_deployer.checksum_cache import get_checksum_address


def _max_uint(bits: int) -> int:
    return typing.cast("int", 2**bits - 1)


MIN_UINT256 = 0
MAX_UINT256 = _max_uint(256)

ZERO_ADDRESS: ChecksumAddress = get_checksum_address("0x0000000000000000000000000000000000000000")

# Ethereum mainnet addresses
UNISWAP_V3_FACTORY: ChecksumAddress = get_checksum_address(
    "0x1F98431c8aD98523631AE4a59f267346ea31F984"
)
WETH: ChecksumAddress = get_checksum_address("0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2")
POO: ChecksumAddress = get_checksum_address("0xCe3eb2c15ceCC8547B5390FB47d5aBAf3d7624db")
POO_WETH_POOL: ChecksumAddress = get_checksum_address("0xcbb503fcc538ea591fd8383e0324cd03542df6ac")

# Constructor arguments for NonfungiblePositionManager: factory, WETH9, token descriptor. WETH
# stands in for the descriptor, so token URIs are not resolvable on the deployed manager.
DEFAULT_POSITION_MANAGER_ARGS: tuple[ChecksumAddress, ChecksumAddress, ChecksumAddress] = (
    UNISWAP_V3_FACTORY,
    WETH,
    WETH,
)

# Offset added to the latest block timestamp when a swap deadline is not given
DEFAULT_SWAP_DEADLINE_SECONDS = 3600
