from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3
from web3.contract import Contract

from univ3_deployer.artifacts import ContractArtifact, get_contract_factory
from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.connection import get_web3
from univ3_deployer.exceptions import DeploymentFailed, TransactionReverted
from univ3_deployer.logging import logger
from univ3_deployer.transaction import get_signers, send_transaction, signer_address
from univ3_deployer.types import Signer


@dataclass(slots=True, frozen=True)
class DeploymentResult:
    contract_name: str
    address: ChecksumAddress
    transaction_hash: HexBytes
    block_number: int
    gas_used: int
    deployer: ChecksumAddress
    contract: Contract

    def __str__(self) -> str:
        return (
            f"{self.contract_name} deployed at {self.address} "
            f"(tx {self.transaction_hash.to_0x_hex()}, block {self.block_number}, "
            f"gas used {self.gas_used}, deployer {self.deployer})"
        )


def deploy_contract(
    contract_name: str,
    constructor_args: Sequence[Any] = (),
    *,
    w3: Web3 | None = None,
    signer: Signer | None = None,
    artifact: ContractArtifact | None = None,
    libraries: Mapping[str, str] | None = None,
) -> DeploymentResult:
    """
    Deploy the named contract with the given constructor arguments and wait for it to be mined.

    The first available signer is used if none is given. Invalid constructor arguments are rejected
    by web3.py while encoding the transaction, and the exception is not caught here.
    """

    if w3 is None:
        w3 = get_web3()
    if signer is None:
        signer = get_signers(w3)[0]

    deployer = signer_address(signer)
    contract_factory = get_contract_factory(
        contract_name,
        w3=w3,
        artifact=artifact,
        libraries=libraries,
    )
    transaction = contract_factory.constructor(*constructor_args).build_transaction(
        {"from": deployer}
    )

    logger.info(f"Deploying {contract_name} from {deployer}")
    try:
        receipt = send_transaction(transaction, signer=signer, w3=w3)
    except TransactionReverted as exc:
        raise DeploymentFailed(
            contract_name=contract_name,
            transaction_hash=exc.transaction_hash,
        ) from exc

    transaction_hash = HexBytes(receipt["transactionHash"])
    contract_address = receipt.get("contractAddress")
    if contract_address is None:
        raise DeploymentFailed(contract_name=contract_name, transaction_hash=transaction_hash)

    address = get_checksum_address(contract_address)
    result = DeploymentResult(
        contract_name=contract_name,
        address=address,
        transaction_hash=transaction_hash,
        block_number=receipt["blockNumber"],
        gas_used=receipt["gasUsed"],
        deployer=deployer,
        contract=w3.eth.contract(address=address, abi=contract_factory.abi),
    )
    logger.info(str(result))
    return result
