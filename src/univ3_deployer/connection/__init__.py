from pathlib import Path

from pydantic import HttpUrl, WebsocketUrl
from web3 import HTTPProvider, IPCProvider, LegacyWebSocketProvider, Web3

from univ3_deployer.config import settings
from univ3_deployer.exceptions import DeployerValueError

from .connection_manager import ConnectionManager


def connect(endpoint: HttpUrl | WebsocketUrl | Path | str | None = None) -> Web3:
    """
    Build a `Web3` instance for an HTTP(S) or WS(S) URL, or a path to an IPC socket. The configured
    RPC endpoint is used if no endpoint is given.
    """

    if endpoint is None:
        endpoint = settings.rpc
    if endpoint is None:
        raise DeployerValueError(message="No RPC endpoint was given or configured.")

    match endpoint:
        case Path():
            return Web3(IPCProvider(ipc_path=endpoint))
        case HttpUrl() | WebsocketUrl():
            return connect(str(endpoint))
        case str() if endpoint.startswith(("http://", "https://")):
            return Web3(HTTPProvider(endpoint))
        case str() if endpoint.startswith(("ws://", "wss://")):
            return Web3(LegacyWebSocketProvider(endpoint))
        case str():
            return Web3(IPCProvider(ipc_path=Path(endpoint).expanduser()))
        case _:
            raise DeployerValueError(message=f"Unsupported RPC endpoint {endpoint!r}")


def get_web3() -> Web3:
    return connection_manager.w3


def set_web3(
    w3: Web3,
    *,
    optimize: bool = True,
) -> None:
    connection_manager.register(w3, optimize=optimize)


connection_manager = ConnectionManager()


__all__ = (
    "connect",
    "connection_manager",
    "get_web3",
    "set_web3",
)
