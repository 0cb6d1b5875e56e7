from univ3_deployer.exceptions.anvil import (
    AnvilError,
    AnvilNotFound,
    AnvilStartupTimeout,
    IPCSocketTimeout,
    Web3ConnectionTimeout,
)
from univ3_deployer.exceptions.artifact import (
    ArtifactError,
    ArtifactNotFound,
    InvalidArtifact,
    UnlinkedLibraries,
)
from univ3_deployer.exceptions.base import DeployerError, DeployerValueError
from univ3_deployer.exceptions.deployment import (
    DeploymentError,
    DeploymentFailed,
    NoSignersAvailable,
    TransactionReverted,
)
from univ3_deployer.exceptions.pool import PoolError

from . import anvil, artifact, deployment, pool

__all__ = (
    "AnvilError",
    "AnvilNotFound",
    "AnvilStartupTimeout",
    "ArtifactError",
    "ArtifactNotFound",
    "DeployerError",
    "DeployerValueError",
    "DeploymentError",
    "DeploymentFailed",
    "IPCSocketTimeout",
    "InvalidArtifact",
    "NoSignersAvailable",
    "PoolError",
    "TransactionReverted",
    "UnlinkedLibraries",
    "Web3ConnectionTimeout",
    "anvil",
    "artifact",
    "deployment",
    "pool",
)
