from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3
from web3.types import TxParams, TxReceipt

from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.config import settings
from univ3_deployer.connection import get_web3
from univ3_deployer.exceptions import NoSignersAvailable, TransactionReverted
from univ3_deployer.logging import logger
from univ3_deployer.types import Signer

FEE_FIELDS = ("gasPrice", "maxFeePerGas", "maxPriorityFeePerGas")


def get_signers(w3: Web3 | None = None) -> list[Signer]:
    """
    Return the accounts available for signing transactions.

    A configured private key takes precedence. Otherwise the unlocked accounts managed by the node
    are used, e.g. the prefunded development accounts of Anvil or Hardhat.
    """

    if settings.private_key is not None:
        account: LocalAccount = Account.from_key(settings.private_key.get_secret_value())
        return [account]

    if w3 is None:
        w3 = get_web3()

    signers: list[Signer] = [get_checksum_address(account) for account in w3.eth.accounts]
    if not signers:
        raise NoSignersAvailable
    return signers


def signer_address(signer: Signer) -> ChecksumAddress:
    if isinstance(signer, LocalAccount):
        return get_checksum_address(signer.address)
    return get_checksum_address(signer)


def send_transaction(
    transaction: TxParams,
    *,
    signer: Signer,
    w3: Web3 | None = None,
) -> TxReceipt:
    """
    Submit the transaction from the signer and wait for it to be mined.

    Node-managed accounts are sent via `eth_sendTransaction`. Local accounts are completed with a
    nonce, chain ID, gas limit and gas price where missing, signed locally and sent via
    `eth_sendRawTransaction`.
    """

    if w3 is None:
        w3 = get_web3()

    sender = signer_address(signer)
    tx = TxParams(**transaction)
    tx["from"] = sender

    if isinstance(signer, LocalAccount):
        if "nonce" not in tx:
            tx["nonce"] = w3.eth.get_transaction_count(sender, "pending")
        if "chainId" not in tx:
            tx["chainId"] = w3.eth.chain_id
        if not any(field in tx for field in FEE_FIELDS):
            tx["gasPrice"] = w3.eth.gas_price
        if "gas" not in tx:
            tx["gas"] = w3.eth.estimate_gas(tx)
        signed_transaction = signer.sign_transaction(tx)  # type:ignore[arg-type]
        transaction_hash = w3.eth.send_raw_transaction(signed_transaction.raw_transaction)
    else:
        transaction_hash = w3.eth.send_transaction(tx)

    logger.info(f"Sent transaction {HexBytes(transaction_hash).to_0x_hex()} from {sender}")

    receipt = w3.eth.wait_for_transaction_receipt(
        transaction_hash,
        timeout=settings.transaction_timeout,
    )
    if receipt["status"] == 0:
        raise TransactionReverted(transaction_hash=HexBytes(transaction_hash))

    return receipt
