from typing import cast

from eth_typing import ChecksumAddress
from web3 import Web3
from web3.types import TxParams, TxReceipt

from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.connection import get_web3
from univ3_deployer.constants import MAX_UINT256, WETH
from univ3_deployer.functions import encode_function_calldata, raw_call
from univ3_deployer.logging import logger
from univ3_deployer.transaction import get_signers, send_transaction, signer_address
from univ3_deployer.types import Signer


def token_balance(
    token: str,
    owner: str,
    *,
    w3: Web3 | None = None,
) -> int:
    if w3 is None:
        w3 = get_web3()

    (balance,) = raw_call(
        w3=w3,
        address=get_checksum_address(token),
        calldata=encode_function_calldata(
            function_prototype="balanceOf(address)",
            function_arguments=[get_checksum_address(owner)],
        ),
        return_types=["uint256"],
    )
    return cast("int", balance)


def wrap_ether(
    amount: int,
    *,
    weth: ChecksumAddress = WETH,
    w3: Web3 | None = None,
    signer: Signer | None = None,
) -> TxReceipt:
    """
    Deposit `amount` wei into the WETH contract, crediting the signer with the wrapped balance.
    """

    if w3 is None:
        w3 = get_web3()
    if signer is None:
        signer = get_signers(w3)[0]

    logger.info(f"Wrapping {amount} wei for {signer_address(signer)}")
    return send_transaction(
        TxParams(
            to=weth,
            value=amount,
            data=encode_function_calldata(
                function_prototype="deposit()",
                function_arguments=None,
            ),
        ),
        signer=signer,
        w3=w3,
    )


def approve(
    token: str,
    spender: str,
    amount: int = MAX_UINT256,
    *,
    w3: Web3 | None = None,
    signer: Signer | None = None,
) -> TxReceipt:
    if w3 is None:
        w3 = get_web3()
    if signer is None:
        signer = get_signers(w3)[0]

    spender = get_checksum_address(spender)
    logger.info(f"Approving {spender} to spend {amount} of token {token}")
    return send_transaction(
        TxParams(
            to=get_checksum_address(token),
            data=encode_function_calldata(
                function_prototype="approve(address,uint256)",
                function_arguments=[spender, amount],
            ),
        ),
        signer=signer,
        w3=w3,
    )
