import contextlib
from collections.abc import Iterator
from typing import Any

import click
import tomlkit
import ujson
from pydantic import TypeAdapter
from web3 import Web3

from univ3_deployer.anvil import AnvilNode
from univ3_deployer.artifacts import ContractArtifact, load_artifact
from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.config import settings
from univ3_deployer.connection import connect, set_web3
from univ3_deployer.constants import POO_WETH_POOL, WETH
from univ3_deployer.deployment import deploy_contract
from univ3_deployer.exceptions import DeployerError
from univ3_deployer.uniswap.deployments import (
    POSITION_MANAGER_CONTRACT_NAME,
    deploy_position_manager,
    deploy_uniswap_v3,
)
from univ3_deployer.uniswap.v3_pool import inspect_pool
from univ3_deployer.version import __version__

rpc_option = click.option(
    "--rpc",
    type=str,
    default=None,
    help="RPC endpoint (HTTP/WS URL or IPC path). Defaults to the configured endpoint.",
)
fork_option = click.option(
    "--fork-url",
    type=str,
    default=None,
    help="Launch a temporary Anvil fork of this endpoint and use it instead of --rpc.",
)


@contextlib.contextmanager
def _web3_connection(rpc: str | None, fork_url: str | None) -> Iterator[Web3]:
    try:
        if fork_url is not None:
            with AnvilNode(fork_url=fork_url) as node:
                set_web3(node.w3)
                yield node.w3
        else:
            w3 = connect(rpc)
            set_web3(w3)
            yield w3
    except DeployerError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.version_option(version=__version__)
def cli() -> None: ...


@cli.group()
def config() -> None:
    """
    Configuration commands
    """


@config.command("show")
@click.option(
    "--json",
    "output_format",
    flag_value="json",
    type=str,
    help="Show configuration in JSON format",
)
@click.option(
    "--toml",
    "output_format",
    flag_value="toml",
    type=str,
    help="Show configuration in TOML format (default)",
    default=True,
)
def config_show(output_format: str) -> None:
    """
    Display the current configuration in JSON or TOML (default) format.
    """

    match output_format:
        case "json":
            click.echo(
                TypeAdapter(dict).dump_json(
                    settings.to_toml_dict(),
                    indent=2,
                ),
            )
        case "toml":
            click.echo(
                tomlkit.dumps(
                    settings.to_toml_dict(),
                ),
            )
        case _:
            ...


def _parse_constructor_argument(abi_type: str, value: str) -> Any:
    """
    Convert a command-line string to the Python value web3 encodes for the ABI type. Arrays and
    tuples are given as JSON, e.g. `[1,2]` or `["0x...",500]`.
    """

    try:
        if abi_type.endswith("]") or abi_type.startswith(("tuple", "(")):
            return ujson.loads(value)
        if abi_type.startswith(("uint", "int")):
            return int(value, 0)
    except ValueError:
        raise click.BadParameter(
            f"{value!r} is not a valid {abi_type} value",
            param_hint="CONSTRUCTOR_ARGS",
        ) from None

    if abi_type == "bool":
        return click.BOOL.convert(value, None, None)
    return value


def _parse_constructor_args(
    artifact: ContractArtifact,
    values: tuple[str, ...],
) -> list[Any]:
    inputs = artifact.constructor_inputs
    if len(values) != len(inputs):
        signature = ", ".join(
            f"{constructor_input['type']} {constructor_input.get('name', '')}".rstrip()
            for constructor_input in inputs
        )
        raise click.BadParameter(
            f"{artifact.contract_name}({signature}) takes {len(inputs)} arguments, "
            f"{len(values)} given",
            param_hint="CONSTRUCTOR_ARGS",
        )
    return [
        _parse_constructor_argument(constructor_input["type"], value)
        for constructor_input, value in zip(inputs, values, strict=True)
    ]


@cli.command("deploy")
@click.option(
    "--contract",
    "contract_name",
    type=str,
    default=POSITION_MANAGER_CONTRACT_NAME,
    show_default=True,
    help="Name of the contract artifact to deploy",
)
@click.argument("constructor_args", nargs=-1, type=str)
@rpc_option
@fork_option
def deploy(
    contract_name: str,
    constructor_args: tuple[str, ...],
    rpc: str | None,
    fork_url: str | None,
) -> None:
    """
    Deploy a contract with the given constructor arguments.

    Without arguments, NonfungiblePositionManager is deployed with the mainnet Uniswap V3 factory,
    WETH and WETH as the token descriptor. Integer arguments may be decimal or 0x-prefixed hex.
    """

    with _web3_connection(rpc, fork_url) as w3:
        if not constructor_args and contract_name == POSITION_MANAGER_CONTRACT_NAME:
            result = deploy_position_manager(w3=w3)
        else:
            artifact = load_artifact(contract_name)
            result = deploy_contract(
                contract_name,
                _parse_constructor_args(artifact, constructor_args),
                w3=w3,
                artifact=artifact,
            )
        click.echo(result)


@cli.command("deploy-stack")
@click.option("--weth", type=str, default=WETH, show_default=True, help="WETH9 address")
@rpc_option
@fork_option
def deploy_stack(weth: str, rpc: str | None, fork_url: str | None) -> None:
    """
    Deploy a Uniswap V3 factory, swap router and position manager.
    """

    with _web3_connection(rpc, fork_url) as w3:
        deployment = deploy_uniswap_v3(get_checksum_address(weth), w3=w3)
        for result in (
            deployment.factory,
            deployment.swap_router,
            deployment.position_manager,
        ):
            click.echo(result)


@cli.group()
def pool() -> None:
    """
    Liquidity pool commands
    """


@pool.command("inspect")
@click.argument("address", type=str, default=POO_WETH_POOL)
@rpc_option
@fork_option
def pool_inspect(address: str, rpc: str | None, fork_url: str | None) -> None:
    """
    Show the price, tick, liquidity and token balances of a Uniswap V3 pool. The POO/WETH pool is
    inspected if no address is given.
    """

    with _web3_connection(rpc, fork_url) as w3:
        snapshot = inspect_pool(address, w3=w3)

    click.echo(f"pool:           {snapshot.address} (block {snapshot.block_number})")
    click.echo(f"sqrtPriceX96:   {snapshot.sqrt_price_x96}")
    click.echo(f"tick:           {snapshot.tick}")
    click.echo(f"liquidity:      {snapshot.liquidity}")
    click.echo(f"token0 balance: {snapshot.balance0} ({snapshot.token0})")
    click.echo(f"token1 balance: {snapshot.balance1} ({snapshot.token1})")
