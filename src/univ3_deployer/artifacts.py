"""
Load compiled contract artifacts in the Hardhat output format and bind them to a `Web3` instance.

An artifact is a JSON file named `<ContractName>.json` holding the contract's ABI, creation bytecode
and link references. The Uniswap packages ship these under
`node_modules/@uniswap/v3-core/artifacts` and `node_modules/@uniswap/v3-periphery/artifacts`.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from hexbytes import HexBytes
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from web3 import Web3
from web3.contract import Contract

from univ3_deployer.checksum_cache import get_checksum_address
from univ3_deployer.config import settings
from univ3_deployer.connection import get_web3
from univ3_deployer.exceptions import (
    ArtifactNotFound,
    DeployerValueError,
    InvalidArtifact,
    UnlinkedLibraries,
)
from univ3_deployer.logging import logger

type LinkReferences = dict[str, dict[str, list[dict[str, int]]]]


class ContractArtifact(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contract_name: str = Field(alias="contractName")
    source_name: str | None = Field(default=None, alias="sourceName")
    abi: list[dict[str, Any]]
    bytecode: str
    deployed_bytecode: str | None = Field(default=None, alias="deployedBytecode")
    link_references: LinkReferences = Field(default_factory=dict, alias="linkReferences")

    @property
    def is_deployable(self) -> bool:
        return self.bytecode.removeprefix("0x") != ""

    @property
    def constructor_inputs(self) -> list[dict[str, Any]]:
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return list(entry.get("inputs", []))
        return []

    @property
    def library_names(self) -> list[str]:
        return [
            library_name
            for references in self.link_references.values()
            for library_name in references
        ]


def find_artifact(contract_name: str, search_paths: Iterable[Path] | None = None) -> Path:
    """
    Return the path to the first `<contract_name>.json` found below the search paths, in order.
    """

    paths = list(search_paths) if search_paths is not None else list(settings.artifact_paths)

    for root in paths:
        if not root.is_dir():
            continue
        # Hardhat debug files are named `<contract_name>.dbg.json` and do not match this pattern
        for candidate in sorted(root.rglob(f"{contract_name}.json")):
            if candidate.is_file():
                return candidate

    raise ArtifactNotFound(contract_name=contract_name, search_paths=paths)


def load_artifact(
    contract_name: str,
    search_paths: Iterable[Path] | None = None,
) -> ContractArtifact:
    path = find_artifact(contract_name, search_paths)
    try:
        artifact = ContractArtifact.model_validate(json.loads(path.read_text()))
    except json.JSONDecodeError as exc:
        raise InvalidArtifact(path=path, reason=f"malformed JSON ({exc})") from exc
    except ValidationError as exc:
        raise InvalidArtifact(path=path, reason=str(exc)) from exc

    logger.debug(f"Loaded artifact for {artifact.contract_name} from {path}")
    return artifact


def link_bytecode(
    artifact: ContractArtifact,
    libraries: Mapping[str, str] | None = None,
) -> HexBytes:
    """
    Insert library addresses into the creation bytecode at the offsets given by the artifact's link
    references.

    Libraries are keyed by name, or by fully-qualified name (`<source_name>:<library_name>`) where
    two sources define a library with the same name.
    """

    if libraries is None:
        libraries = {}

    bytecode = artifact.bytecode.removeprefix("0x")
    missing: list[str] = []

    for source_name, references in artifact.link_references.items():
        for library_name, offsets in references.items():
            address = libraries.get(f"{source_name}:{library_name}", libraries.get(library_name))
            if address is None:
                missing.append(library_name)
                continue

            address_hex = get_checksum_address(address)[2:].lower()
            for offset in offsets:
                # Offsets are in bytes, two hex characters each
                start = offset["start"] * 2
                end = start + offset["length"] * 2
                bytecode = bytecode[:start] + address_hex + bytecode[end:]

    if missing:
        raise UnlinkedLibraries(contract_name=artifact.contract_name, libraries=missing)

    return HexBytes(bytecode)


def get_contract_factory(
    contract_name: str,
    *,
    w3: Web3 | None = None,
    artifact: ContractArtifact | None = None,
    libraries: Mapping[str, str] | None = None,
) -> type[Contract]:
    """
    Return a contract class for the named artifact, ready for `.constructor(...)`.
    """

    if w3 is None:
        w3 = get_web3()
    if artifact is None:
        artifact = load_artifact(contract_name)

    if not artifact.is_deployable:
        raise DeployerValueError(
            message=f"Artifact for {artifact.contract_name} has no bytecode (abstract contract or "
            "interface)."
        )

    return w3.eth.contract(
        abi=artifact.abi,
        bytecode=link_bytecode(artifact, libraries),
    )
