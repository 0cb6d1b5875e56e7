from dataclasses import dataclass

from eth_typing import ChecksumAddress
from web3 import Web3

from univ3_deployer.connection import get_web3
from univ3_deployer.constants import DEFAULT_POSITION_MANAGER_ARGS, WETH
from univ3_deployer.deployment import DeploymentResult, deploy_contract
from univ3_deployer.transaction import get_signers
from univ3_deployer.types import Signer

FACTORY_CONTRACT_NAME = "UniswapV3Factory"
SWAP_ROUTER_CONTRACT_NAME = "SwapRouter"
POSITION_MANAGER_CONTRACT_NAME = "NonfungiblePositionManager"


@dataclass(slots=True, frozen=True)
class UniswapV3Deployment:
    factory: DeploymentResult
    swap_router: DeploymentResult
    position_manager: DeploymentResult


def deploy_position_manager(
    *,
    w3: Web3 | None = None,
    signer: Signer | None = None,
) -> DeploymentResult:
    """
    Deploy a `NonfungiblePositionManager` bound to the mainnet Uniswap V3 factory and WETH.
    """

    return deploy_contract(
        POSITION_MANAGER_CONTRACT_NAME,
        DEFAULT_POSITION_MANAGER_ARGS,
        w3=w3,
        signer=signer,
    )


def deploy_uniswap_v3(
    weth: ChecksumAddress = WETH,
    *,
    w3: Web3 | None = None,
    signer: Signer | None = None,
) -> UniswapV3Deployment:
    """
    Deploy a new factory, then a swap router and position manager bound to it.
    """

    if w3 is None:
        w3 = get_web3()
    if signer is None:
        signer = get_signers(w3)[0]

    factory = deploy_contract(FACTORY_CONTRACT_NAME, w3=w3, signer=signer)
    swap_router = deploy_contract(
        SWAP_ROUTER_CONTRACT_NAME,
        (factory.address, weth),
        w3=w3,
        signer=signer,
    )
    position_manager = deploy_contract(
        POSITION_MANAGER_CONTRACT_NAME,
        (factory.address, weth, weth),
        w3=w3,
        signer=signer,
    )

    return UniswapV3Deployment(
        factory=factory,
        swap_router=swap_router,
        position_manager=position_manager,
    )
