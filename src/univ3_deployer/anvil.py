import pathlib
import shutil
import socket
import subprocess
import tempfile
from typing import cast

import tenacity
from pydantic import validate_call
from web3 import IPCProvider, Web3
from web3.types import RPCEndpoint

from univ3_deployer.exceptions import (
    AnvilError,
    AnvilNotFound,
    DeployerValueError,
    IPCSocketTimeout,
    Web3ConnectionTimeout,
)
from univ3_deployer.logging import logger
from univ3_deployer.types import BlockNumber
from univ3_deployer.validation import ValidatedUint256

type AnvilOptions = list[str]

CONNECTION_TIMEOUT = 10


class AnvilNode:
    """
    Launch an Anvil node as a separate process, either as a fresh development chain or as a fork of
    another chain, and expose methods for commonly-used RPC calls.

    Provides a `Web3` connector to Anvil's IPC socket endpoint at the `.w3` attribute.
    """

    def __init__(
        self,
        *,
        fork_url: str | None = None,
        fork_block: BlockNumber | None = None,
        chain_id: int | None = None,
        ipc_path: pathlib.Path | None = None,
        capture_path: pathlib.Path | None = None,
        preserve_capture: bool = False,
        mnemonic: str = (
            # Default mnemonic used by Brownie for Ganache forks
            "patient rude simple dog close planet oval animal hunt sketch suspect slim"
        ),
        ipc_provider_kwargs: dict | None = None,
        anvil_opts: list[str] | None = None,  # Additional options passed to the Anvil command
    ) -> None:
        _path_to_anvil = shutil.which("anvil")
        if _path_to_anvil is None:  # pragma: no cover
            raise AnvilNotFound
        path_to_anvil = pathlib.Path(_path_to_anvil)

        if fork_block is not None and fork_url is None:
            raise DeployerValueError(message="A fork block was specified without a fork URL.")

        tmp_dir = pathlib.Path(tempfile.gettempdir())
        self.ipc_path = tmp_dir if ipc_path is None else ipc_path
        self.capture_path = tmp_dir if capture_path is None else capture_path
        self.preserve_capture = preserve_capture
        self.ipc_provider_kwargs = ipc_provider_kwargs if ipc_provider_kwargs is not None else {}
        self.fork_url = fork_url

        self.port = self._get_free_port_number()

        command: AnvilOptions = [
            str(path_to_anvil),
            "--auto-impersonate",
            f"--port={self.port}",
            f"--ipc={self.ipc_filename}",
            f"--mnemonic={mnemonic}",
        ]
        if fork_url is not None:
            command.append(f"--fork-url={fork_url}")
            command.append("--no-rate-limit")
        if fork_block is not None:
            command.append(f"--fork-block-number={fork_block}")
        if chain_id is not None:
            command.append(f"--chain-id={chain_id}")
        if anvil_opts:
            command.extend(anvil_opts)

        self._anvil_command = command
        self._setup_process(self._anvil_command)
        self._setup_w3()

        logger.info(
            f"Launched Anvil on port {self.port}"
            + (f", forked from {fork_url}" if fork_url is not None else "")
        )

    @property
    def http_url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def ipc_filename(self) -> pathlib.Path:
        return self.ipc_path / f"anvil-{self.port}.ipc"

    @property
    def stderr_capture_filename(self) -> pathlib.Path:
        return self.capture_path / f"anvil-{self.port}.stderr"

    @property
    def stdout_capture_filename(self) -> pathlib.Path:
        return self.capture_path / f"anvil-{self.port}.stdout"

    @property
    def ws_url(self) -> str:
        return f"ws://localhost:{self.port}"

    @staticmethod
    def _get_free_port_number() -> int:
        with socket.socket() as sock:
            sock.bind(("", 0))
            _, _port = sock.getsockname()
            return cast("int", _port)

    def _setup_w3(self) -> None:
        """
        Create a Web3 connection to the IPC socket used by Anvil, waiting for the connection to be
        established.
        """

        try:
            # network I/O is less reliable, so wait with an exponential delay and jitter
            w3 = Web3(IPCProvider(ipc_path=self.ipc_filename, **self.ipc_provider_kwargs))
            w3_connected_check_with_retry = tenacity.Retrying(
                stop=tenacity.stop_after_delay(CONNECTION_TIMEOUT),
                wait=tenacity.wait_exponential_jitter(),
                retry=tenacity.retry_if_result(lambda result: result is False),
            )
            w3_connected_check_with_retry(fn=w3.is_connected)
        except tenacity.RetryError as exc:
            self.close()
            raise Web3ConnectionTimeout(self.ipc_filename, CONNECTION_TIMEOUT) from exc

        self.w3 = w3

    def _setup_process(self, anvil_command: AnvilOptions) -> None:
        """
        Launch an Anvil subprocess, waiting for the IPC socket to be created.
        """

        with (
            self.stderr_capture_filename.open("w") as stderr_capture,
            self.stdout_capture_filename.open("w") as stdout_capture,
        ):
            process = subprocess.Popen(  # noqa: S603
                anvil_command,
                stderr=stderr_capture,
                stdout=stdout_capture,
                text=True,
            )

        try:
            # Storage I/O should be fast, so use a low fixed wait time
            filename_check_with_retry = tenacity.Retrying(
                stop=tenacity.stop_after_delay(CONNECTION_TIMEOUT),
                wait=tenacity.wait_fixed(0.01),
                retry=tenacity.retry_if_result(lambda result: result is False),
            )
            filename_check_with_retry(fn=self.ipc_filename.exists)
        except tenacity.RetryError as exc:
            process.terminate()
            raise IPCSocketTimeout(self.ipc_filename, CONNECTION_TIMEOUT) from exc
        else:
            self._process = process

    def __del__(self) -> None:
        self.close()

    def __enter__(self) -> "AnvilNode":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if getattr(self, "_process", None):
            self._process.terminate()
            self._process.wait(10)
            self.ipc_filename.unlink(missing_ok=True)
            del self._process

        if not getattr(self, "preserve_capture", True):
            self.stderr_capture_filename.unlink(missing_ok=True)
            self.stdout_capture_filename.unlink(missing_ok=True)

    def _make_request(self, method: str, params: list) -> object:
        resp = self.w3.provider.make_request(
            method=RPCEndpoint(method),
            params=params,
        )
        if "error" in resp:
            raise AnvilError(method=method, error=str(resp["error"]))
        return resp.get("result")

    def mine(self) -> None:
        self._make_request("evm_mine", [])

    @validate_call
    def set_balance(
        self,
        address: str,
        balance: ValidatedUint256,
    ) -> None:
        self._make_request("anvil_setBalance", [address, hex(balance)])

    def set_code(self, address: str, bytecode: bytes) -> None:
        self._make_request("anvil_setCode", [address, "0x" + bytecode.hex()])

    def set_snapshot(self) -> int:
        return int(cast("str", self._make_request("evm_snapshot", [])), 16)

    def return_to_snapshot(self, snapshot_id: int) -> None:
        if snapshot_id < 0:
            raise DeployerValueError(message="ID cannot be negative")

        method = "evm_revert"
        # Anvil returns False for unknown snapshots
        if self._make_request(method, [snapshot_id]) is False:
            raise AnvilError(
                method=method,
                error=f"Failed to revert to snapshot {snapshot_id}",
            )
