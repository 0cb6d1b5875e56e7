class DeployerError(Exception):
    """
    Base exception used as the parent class for all exceptions raised by this package.

    Calling code should catch `DeployerError` and derived classes separately before general
    exceptions, e.g.:

    ```
    try:
        univ3_deployer.deploy_contract(...)
    except ArtifactNotFound:
        ... # handle a specific exception
    except DeployerError:
        ... # handle non-specific package exception
    except Exception:
        ... # handle exceptions raised by web3.py, eth-abi or Python built-ins
    ```

    An optional string-formatted message may be attached to the exception and retrieved by accessing
    the `.message` attribute.
    """

    message: str | None = None

    def __init__(self, message: str | None = None) -> None:
        if message:
            self.message = message
            super().__init__(message)


class DeployerValueError(DeployerError): ...
