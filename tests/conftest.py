import json
import logging
import shutil
from collections.abc import Generator
from pathlib import Path

import dotenv
import pytest

from univ3_deployer.anvil import AnvilNode
from univ3_deployer.config import settings
from univ3_deployer.connection import connection_manager
from univ3_deployer.logging import logger

env_file = dotenv.find_dotenv("tests.env")
env_values = dotenv.dotenv_values(env_file) if env_file else {}

ETHEREUM_ARCHIVE_NODE_HTTP_URI = env_values.get("ETHEREUM_ARCHIVE_NODE_HTTP_URI")

ANVIL_AVAILABLE = shutil.which("anvil") is not None

# Creation code that returns a single STOP opcode as the runtime code. Constructor arguments
# appended to it are never read.
STUB_CREATION_CODE = "0x60016000f3"
STUB_RUNTIME_CODE = "0x00"

# A private key unrelated to the accounts Anvil generates from its mnemonic
TEST_PRIVATE_KEY = "0x" + "42" * 32


def _address_inputs(*names: str) -> list[dict[str, str]]:
    return [{"internalType": "address", "name": name, "type": "address"} for name in names]


def _write_artifact(
    root: Path,
    source_name: str,
    contract_name: str,
    constructor_inputs: list[dict[str, str]],
    bytecode: str = STUB_CREATION_CODE,
    link_references: dict | None = None,
) -> Path:
    artifact_dir = root / source_name
    artifact_dir.mkdir(parents=True, exist_ok=True)
    artifact_path = artifact_dir / f"{contract_name}.json"
    artifact_path.write_text(
        json.dumps(
            {
                "_format": "hh-sol-artifact-1",
                "contractName": contract_name,
                "sourceName": source_name,
                "abi": [
                    {
                        "inputs": constructor_inputs,
                        "stateMutability": "nonpayable",
                        "type": "constructor",
                    }
                ],
                "bytecode": bytecode,
                "deployedBytecode": STUB_RUNTIME_CODE,
                "linkReferences": link_references or {},
                "deployedLinkReferences": {},
            }
        )
    )
    # Hardhat writes a debug file beside each artifact
    (artifact_dir / f"{contract_name}.dbg.json").write_text(
        json.dumps({"_format": "hh-sol-dbg-1", "buildInfo": "../../build-info/0.json"})
    )
    return artifact_path


@pytest.fixture
def artifact_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    A Hardhat artifact tree holding stand-ins for the Uniswap V3 contracts, with the same
    constructor signatures and stub bytecode. The tree is set as the only artifact search path.
    """

    root = tmp_path / "artifacts"
    _write_artifact(
        root,
        "contracts/UniswapV3Factory.sol",
        "UniswapV3Factory",
        [],
    )
    _write_artifact(
        root,
        "contracts/SwapRouter.sol",
        "SwapRouter",
        _address_inputs("_factory", "_WETH9"),
    )
    _write_artifact(
        root,
        "contracts/NonfungiblePositionManager.sol",
        "NonfungiblePositionManager",
        _address_inputs("_factory", "_WETH9", "_tokenDescriptor_"),
    )
    _write_artifact(
        root,
        "contracts/test/MockPositionManager.sol",
        "MockPositionManager",
        _address_inputs("_factory", "_WETH9", "_tokenDescriptor_"),
    )
    _write_artifact(
        root,
        "contracts/test/MockFeeTier.sol",
        "MockFeeTier",
        [
            *_address_inputs("_factory"),
            {"internalType": "uint24", "name": "fee", "type": "uint24"},
            {"internalType": "int24", "name": "tickSpacing", "type": "int24"},
            {"internalType": "bool", "name": "enabled", "type": "bool"},
        ],
    )

    monkeypatch.setattr(settings, "artifact_paths", [root])
    return root


@pytest.fixture(autouse=True)
def _initialize_and_reset_after_each_test(monkeypatch: pytest.MonkeyPatch):
    """
    Before each test, clear/reset global values and singletons
    """
    connection_manager.clear()
    monkeypatch.setattr(settings, "private_key", None)


@pytest.fixture(scope="session", autouse=True)
def _set_logging():
    """
    Set the logging level to DEBUG for the test run
    """
    logger.setLevel(logging.DEBUG)


@pytest.fixture
def anvil_node() -> Generator[AnvilNode, None, None]:
    """
    A fresh Anvil development chain with prefunded, unlocked accounts.
    """

    if not ANVIL_AVAILABLE:
        pytest.skip("anvil is not installed")

    node = AnvilNode()
    yield node
    node.close()


@pytest.fixture
def fork_mainnet_archive(request: pytest.FixtureRequest) -> Generator[AnvilNode, None, None]:
    """
    An AnvilNode forked from the mainnet archive node set in `tests.env`. To fork from a specific
    block, parametrize the test with an indirect parameter for this fixture, e.g.:

    ```
    @pytest.mark.parametrize(
        "fork_mainnet_archive", [block_number], indirect=True
    )
    def test_using_fork(
        fork_mainnet_archive: AnvilNode
    ):
        ...
    ```
    """

    if not ANVIL_AVAILABLE:
        pytest.skip("anvil is not installed")
    if ETHEREUM_ARCHIVE_NODE_HTTP_URI is None:
        pytest.skip("ETHEREUM_ARCHIVE_NODE_HTTP_URI is not set in tests.env")

    block_number = getattr(request, "param", None)

    fork = AnvilNode(
        fork_url=ETHEREUM_ARCHIVE_NODE_HTTP_URI,
        fork_block=block_number,
        ipc_provider_kwargs={"timeout": None},
    )
    yield fork
    fork.close()
