from pathlib import Path

from univ3_deployer.exceptions.base import DeployerError

"""
Exceptions defined here are raised by functions in the `artifacts` module.
"""


class ArtifactError(DeployerError):
    """
    Exception raised while locating, parsing or linking a compiled contract artifact.
    """


class ArtifactNotFound(ArtifactError):
    def __init__(self, contract_name: str, search_paths: list[Path]) -> None:
        self.contract_name = contract_name
        self.search_paths = search_paths
        super().__init__(
            message=f"No artifact for contract {contract_name!r} found in "
            f"{', '.join(str(path) for path in search_paths) or '(no search paths)'}."
        )


class InvalidArtifact(ArtifactError):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(message=f"Invalid artifact at {path}: {reason}")


class UnlinkedLibraries(ArtifactError):
    def __init__(self, contract_name: str, libraries: list[str]) -> None:
        self.contract_name = contract_name
        self.libraries = libraries
        super().__init__(
            message=f"Bytecode for {contract_name} requires addresses for libraries: "
            f"{', '.join(libraries)}"
        )
