from hexbytes import HexBytes

from univ3_deployer.exceptions.base import DeployerError

"""
Exceptions defined here are raised by the transaction and deployment helpers.
"""


class DeploymentError(DeployerError):
    """
    Exception raised while submitting a transaction or deploying a contract.
    """


class NoSignersAvailable(DeploymentError):
    def __init__(self) -> None:
        super().__init__(
            message="No signer available: configure a private key or use a node with unlocked "
            "accounts."
        )


class TransactionReverted(DeploymentError):
    def __init__(self, transaction_hash: HexBytes) -> None:
        self.transaction_hash = transaction_hash
        super().__init__(message=f"Transaction {transaction_hash.to_0x_hex()} reverted.")


class DeploymentFailed(DeploymentError):
    def __init__(self, contract_name: str, transaction_hash: HexBytes) -> None:
        self.contract_name = contract_name
        self.transaction_hash = transaction_hash
        super().__init__(
            message=f"Deployment of {contract_name} in transaction "
            f"{transaction_hash.to_0x_hex()} did not create a contract."
        )
