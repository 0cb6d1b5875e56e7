from pathlib import Path

import pytest
import web3
from eth_abi.exceptions import EncodingError
from eth_account import Account
from hexbytes import HexBytes
from web3.exceptions import Web3Exception

from univ3_deployer import (
    AnvilNode,
    deploy_contract,
    deploy_position_manager,
    deploy_uniswap_v3,
    set_web3,
)
from univ3_deployer.constants import DEFAULT_POSITION_MANAGER_ARGS, POO, WETH, ZERO_ADDRESS
from univ3_deployer.exceptions import ArtifactNotFound, DeploymentFailed, TransactionReverted

from .conftest import STUB_CREATION_CODE, STUB_RUNTIME_CODE, TEST_PRIVATE_KEY


@pytest.mark.anvil
def test_deploy_with_three_addresses(anvil_node: AnvilNode, artifact_dir: Path):
    w3 = anvil_node.w3
    deployer = w3.eth.accounts[0]

    result = deploy_contract("MockPositionManager", DEFAULT_POSITION_MANAGER_ARGS, w3=w3)

    assert result.contract_name == "MockPositionManager"
    assert result.address
    assert result.address != ZERO_ADDRESS
    assert result.deployer == deployer
    assert result.gas_used > 0
    assert result.contract.address == result.address
    assert w3.eth.get_code(result.address) == HexBytes(STUB_RUNTIME_CODE)
    assert w3.eth.get_transaction_receipt(result.transaction_hash)["contractAddress"] == (
        result.address
    )
    assert result.address in str(result)


@pytest.mark.anvil
def test_deploy_with_malformed_address(anvil_node: AnvilNode, artifact_dir: Path):
    w3 = anvil_node.w3
    block_before = w3.eth.block_number

    with pytest.raises((Web3Exception, EncodingError)):
        deploy_contract("MockPositionManager", ("0xnotanaddress", WETH, WETH), w3=w3)

    # Rejected before anything was sent
    assert w3.eth.block_number == block_before


@pytest.mark.anvil
def test_deploy_twice_gives_distinct_addresses(anvil_node: AnvilNode, artifact_dir: Path):
    w3 = anvil_node.w3
    first = deploy_contract("MockPositionManager", (WETH, POO, WETH), w3=w3)
    second = deploy_contract("MockPositionManager", (WETH, POO, WETH), w3=w3)
    assert first.address != second.address


@pytest.mark.anvil
def test_deploy_uses_registered_web3(anvil_node: AnvilNode, artifact_dir: Path):
    set_web3(anvil_node.w3)
    result = deploy_position_manager()
    assert result.contract_name == "NonfungiblePositionManager"
    assert result.address


@pytest.mark.anvil
def test_deploy_from_local_account(anvil_node: AnvilNode, artifact_dir: Path):
    signer = Account.from_key(TEST_PRIVATE_KEY)
    anvil_node.set_balance(signer.address, 10**18)

    result = deploy_position_manager(w3=anvil_node.w3, signer=signer)
    assert result.deployer == signer.address
    assert anvil_node.w3.eth.get_transaction(result.transaction_hash)["from"] == signer.address


@pytest.mark.anvil
def test_deploy_missing_artifact(anvil_node: AnvilNode, artifact_dir: Path):
    with pytest.raises(ArtifactNotFound):
        deploy_contract("UniswapV3Staker", (), w3=anvil_node.w3)


@pytest.mark.anvil
def test_deploy_uniswap_v3(anvil_node: AnvilNode, artifact_dir: Path):
    w3 = anvil_node.w3
    deployment = deploy_uniswap_v3(w3=w3)

    addresses = {
        deployment.factory.address,
        deployment.swap_router.address,
        deployment.position_manager.address,
    }
    assert len(addresses) == 3
    assert deployment.factory.contract_name == "UniswapV3Factory"
    assert deployment.swap_router.contract_name == "SwapRouter"
    assert deployment.position_manager.contract_name == "NonfungiblePositionManager"

    # Contracts are created in order, from the same deployer
    assert (
        deployment.factory.block_number
        < deployment.swap_router.block_number
        < deployment.position_manager.block_number
    )
    assert deployment.factory.deployer == deployment.position_manager.deployer


DEPLOYER_ADDRESS = "0xA69babEF1cA67A37Ffaf7a485DfFF3382056e78C"
TRANSACTION_HASH = HexBytes("0x" + "cd" * 32)


class FakeConstructor:
    def __init__(self, args: tuple) -> None:
        self.args = args

    def build_transaction(self, transaction: dict) -> dict:
        return {**transaction, "data": STUB_CREATION_CODE}


class FakeContractFactory:
    abi: list = []

    def constructor(self, *args: object) -> FakeConstructor:
        return FakeConstructor(args)


@pytest.fixture
def fake_contract_factory(monkeypatch: pytest.MonkeyPatch) -> FakeContractFactory:
    factory = FakeContractFactory()
    monkeypatch.setattr(
        "univ3_deployer.deployment.get_contract_factory",
        lambda *args, **kwargs: factory,
    )
    return factory


def test_deploy_reverted(monkeypatch: pytest.MonkeyPatch, fake_contract_factory):
    def reverting_send_transaction(transaction, *, signer, w3=None):
        raise TransactionReverted(transaction_hash=TRANSACTION_HASH)

    monkeypatch.setattr("univ3_deployer.deployment.send_transaction", reverting_send_transaction)

    with pytest.raises(DeploymentFailed, match="did not create a contract") as exc_info:
        deploy_contract(
            "NonfungiblePositionManager",
            DEFAULT_POSITION_MANAGER_ARGS,
            w3=web3.Web3(),
            signer=DEPLOYER_ADDRESS,
        )
    assert exc_info.value.contract_name == "NonfungiblePositionManager"
    assert exc_info.value.transaction_hash == TRANSACTION_HASH
    assert isinstance(exc_info.value.__cause__, TransactionReverted)


def test_deploy_without_contract_address(monkeypatch: pytest.MonkeyPatch, fake_contract_factory):
    monkeypatch.setattr(
        "univ3_deployer.deployment.send_transaction",
        lambda transaction, *, signer, w3=None: {
            "transactionHash": TRANSACTION_HASH,
            "status": 1,
            "contractAddress": None,
            "blockNumber": 1,
            "gasUsed": 21_000,
        },
    )

    with pytest.raises(DeploymentFailed) as exc_info:
        deploy_contract(
            "NonfungiblePositionManager",
            DEFAULT_POSITION_MANAGER_ARGS,
            w3=web3.Web3(),
            signer=DEPLOYER_ADDRESS,
        )
    assert exc_info.value.transaction_hash == TRANSACTION_HASH


def test_deploy_result_from_receipt(monkeypatch: pytest.MonkeyPatch, fake_contract_factory):
    contract_address = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
    sent = []

    def fake_send_transaction(transaction, *, signer, w3=None):
        sent.append((transaction, signer))
        return {
            "transactionHash": TRANSACTION_HASH,
            "status": 1,
            "contractAddress": contract_address.lower(),
            "blockNumber": 7,
            "gasUsed": 123_456,
        }

    monkeypatch.setattr("univ3_deployer.deployment.send_transaction", fake_send_transaction)

    result = deploy_contract(
        "NonfungiblePositionManager",
        DEFAULT_POSITION_MANAGER_ARGS,
        w3=web3.Web3(),
        signer=DEPLOYER_ADDRESS.lower(),
    )

    ((transaction, signer),) = sent
    assert transaction["from"] == DEPLOYER_ADDRESS
    assert signer == DEPLOYER_ADDRESS.lower()
    assert result.address == contract_address
    assert result.deployer == DEPLOYER_ADDRESS
    assert result.block_number == 7
    assert result.gas_used == 123_456
    assert result.contract.address == contract_address
    assert str(result) == (
        f"NonfungiblePositionManager deployed at {contract_address} "
        f"(tx {TRANSACTION_HASH.to_0x_hex()}, block 7, gas used 123456, "
        f"deployer {DEPLOYER_ADDRESS})"
    )
