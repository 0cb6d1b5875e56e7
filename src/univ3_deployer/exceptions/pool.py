from univ3_deployer.exceptions.base import DeployerError


class PoolError(DeployerError):
    """
    Raised when a liquidity pool contract cannot be read or its data cannot be decoded.
    """
