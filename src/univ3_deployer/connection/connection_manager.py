from json import JSONDecodeError
from typing import TYPE_CHECKING, cast

import tenacity
from ujson import loads as ujson_loads
from web3 import JSONBaseProvider, Web3
from web3.types import RPCResponse

from univ3_deployer.exceptions import DeployerValueError
from univ3_deployer.logging import logger

CONNECTION_TIMEOUT = 10


def _decode_rpc_response(raw_response: bytes) -> RPCResponse:
    try:
        return cast("RPCResponse", ujson_loads(raw_response))
    except ValueError:
        # web3 only recognizes JSONDecodeError as a malformed response
        raise JSONDecodeError("Malformed JSON-RPC response", "[]", 0) from None


class ConnectionManager:
    """
    Holds the `Web3` instance used by operations that are not passed one explicitly.
    """

    def __init__(self) -> None:
        self._w3: Web3 | None = None
        self.connection_timeout: float = CONNECTION_TIMEOUT

    @property
    def w3(self) -> Web3:
        if self._w3 is None:
            raise DeployerValueError(
                message="No Web3 instance has been registered. Call set_web3() or pass `w3`."
            )
        return self._w3

    def register(
        self,
        w3: Web3,
        *,
        optimize: bool = True,
    ) -> None:
        """
        Wait for the provider to accept a connection, then make `w3` the registered instance.

        With `optimize`, the middleware is removed and responses are decoded with ujson. Neither
        is needed to deploy or call contracts.
        """

        connect_with_retry = tenacity.Retrying(
            stop=tenacity.stop_after_delay(self.connection_timeout),
            wait=tenacity.wait_exponential_jitter(max=2),
            retry=tenacity.retry_if_result(lambda connected: connected is False),
        )
        try:
            connect_with_retry(w3.is_connected)
        except tenacity.RetryError as exc:
            raise DeployerValueError(
                message=f"Could not connect to {w3.provider} within "
                f"{self.connection_timeout} seconds."
            ) from exc

        if optimize:
            w3.middleware_onion.clear()
            if TYPE_CHECKING:
                assert isinstance(w3.provider, JSONBaseProvider)
            w3.provider.decode_rpc_response = _decode_rpc_response  # type:ignore[method-assign]

        self._w3 = w3
        logger.debug(f"Registered Web3 instance for {w3.provider}")

    def clear(self) -> None:
        self._w3 = None
