from pathlib import Path

from univ3_deployer.exceptions.base import DeployerError


class AnvilError(DeployerError):
    """
    Raised on errors resulting from failed calls to Anvil via JSON-RPC.
    """

    def __init__(self, method: str, error: str) -> None:
        self.method = method
        self.error = error
        super().__init__(message=f"Anvil RPC call to {method} failed: {error}")


class AnvilNotFound(DeployerError):
    def __init__(self) -> None:  # pragma: no cover
        super().__init__(message="Anvil path could not be located.")


class AnvilStartupTimeout(DeployerError):
    """
    Raised when a launched Anvil process is not reachable over IPC in time. The process has been
    terminated when this is raised.
    """

    def __init__(self, ipc_path: Path, timeout_seconds: float, reason: str) -> None:
        self.ipc_path = ipc_path
        self.timeout_seconds = timeout_seconds
        super().__init__(message=f"Anvil {reason} at {ipc_path} within {timeout_seconds} seconds.")


class IPCSocketTimeout(AnvilStartupTimeout):
    def __init__(self, ipc_path: Path, timeout_seconds: float) -> None:
        super().__init__(ipc_path, timeout_seconds, reason="did not create its IPC socket")


class Web3ConnectionTimeout(AnvilStartupTimeout):
    def __init__(self, ipc_path: Path, timeout_seconds: float) -> None:
        super().__init__(
            ipc_path, timeout_seconds, reason="did not answer requests on its IPC socket"
        )
