from dataclasses import dataclass

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3
from web3.types import TxParams

from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.connection import get_web3
from univ3_deployer.constants import DEFAULT_SWAP_DEADLINE_SECONDS
from univ3_deployer.functions import encode_function_calldata
from univ3_deployer.logging import logger
from univ3_deployer.transaction import get_signers, send_transaction, signer_address
from univ3_deployer.types import Signer
from univ3_deployer.uniswap.erc20 import token_balance
from univ3_deployer.uniswap.v3_pool import PoolSnapshot, inspect_pool

EXACT_INPUT_SINGLE_PROTOTYPE = (
    "exactInputSingle((address,address,uint24,address,uint256,uint256,uint256,uint160))"
)


@dataclass(slots=True, frozen=True)
class SwapResult:
    transaction_hash: HexBytes
    token_in: ChecksumAddress
    token_out: ChecksumAddress
    amount_in_spent: int
    pool_before: PoolSnapshot | None
    pool_after: PoolSnapshot | None

    @property
    def pool_balance_deltas(self) -> tuple[int, int] | None:
        """
        The change of the pool's (token0, token1) balances across the swap.
        """

        if self.pool_before is None or self.pool_after is None:
            return None
        return (
            self.pool_after.balance0 - self.pool_before.balance0,
            self.pool_after.balance1 - self.pool_before.balance1,
        )


def exact_input_single(
    router: str,
    token_in: str,
    token_out: str,
    fee: int,
    amount_in: int,
    amount_out_minimum: int = 0,
    sqrt_price_limit_x96: int = 0,
    deadline: int | None = None,
    pool: str | None = None,
    *,
    w3: Web3 | None = None,
    signer: Signer | None = None,
) -> SwapResult:
    """
    Swap an exact amount of `token_in` for `token_out` through a single pool via the SwapRouter.

    The router must already be approved to spend `token_in`. If the pool address is given, its
    state is recorded before and after the swap.
    """

    if w3 is None:
        w3 = get_web3()
    if signer is None:
        signer = get_signers(w3)[0]
    if deadline is None:
        deadline = w3.eth.get_block("latest")["timestamp"] + DEFAULT_SWAP_DEADLINE_SECONDS

    recipient = signer_address(signer)
    token_in = get_checksum_address(token_in)
    token_out = get_checksum_address(token_out)

    pool_before = inspect_pool(pool, w3=w3) if pool is not None else None
    balance_in_before = token_balance(token_in, recipient, w3=w3)

    receipt = send_transaction(
        TxParams(
            to=get_checksum_address(router),
            data=encode_function_calldata(
                function_prototype=EXACT_INPUT_SINGLE_PROTOTYPE,
                function_arguments=[
                    (
                        token_in,
                        token_out,
                        fee,
                        recipient,
                        deadline,
                        amount_in,
                        amount_out_minimum,
                        sqrt_price_limit_x96,
                    )
                ],
            ),
        ),
        signer=signer,
        w3=w3,
    )

    balance_in_after = token_balance(token_in, recipient, w3=w3)
    pool_after = inspect_pool(pool, w3=w3) if pool is not None else None

    result = SwapResult(
        transaction_hash=HexBytes(receipt["transactionHash"]),
        token_in=token_in,
        token_out=token_out,
        amount_in_spent=balance_in_before - balance_in_after,
        pool_before=pool_before,
        pool_after=pool_after,
    )
    logger.info(
        f"Swapped {result.amount_in_spent} of {token_in} for {token_out} "
        f"(pool balance deltas: {result.pool_balance_deltas})"
    )
    return result
