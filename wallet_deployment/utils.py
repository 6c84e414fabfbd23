import json
from pathlib import Path
from typing import List

import yaml
from ape import networks, project
from ape.contracts import ContractContainer, ContractInstance
from ethpm_types import ContractType

from wallet_deployment.constants import ARTIFACTS_DIR, CONSTRUCTOR_PARAMS_DIR, CONTRACT_BUILD_DIR


def _load_yaml(filepath: Path) -> dict:
    with open(filepath, "r") as file:
        return yaml.safe_load(file) or {}


def _load_json(filepath: Path) -> dict:
    with open(filepath, "r") as file:
        return json.load(file)


def contract_container_from_artifact(filepath: Path) -> ContractContainer:
    """
    Builds a container from a truffle-style build artifact, i.e. a JSON file
    with 'contractName', 'abi', 'bytecode' and 'deployedBytecode'.
    """
    artifact = _load_json(filepath)
    missing = {"contractName", "abi"} - set(artifact)
    if missing:
        raise ValueError(f"Malformed contract artifact {filepath}; missing {sorted(missing)}")

    contract_type = ContractType.model_validate(
        {
            "contractName": artifact["contractName"],
            "abi": artifact["abi"],
            "deploymentBytecode": {"bytecode": artifact.get("bytecode")},
            "runtimeBytecode": {"bytecode": artifact.get("deployedBytecode")},
        }
    )
    return ContractContainer(contract_type)


def get_contract_container(name: str, build_dir: Path = CONTRACT_BUILD_DIR) -> ContractContainer:
    """Looks a contract up in the ape project first, then in the build artifacts."""
    try:
        return getattr(project, name)
    except AttributeError:
        pass

    artifact_filepath = Path(build_dir) / f"{name}.json"
    if not artifact_filepath.exists():
        raise ValueError(f"No contract found with name '{name}' in the project or {build_dir}.")
    return contract_container_from_artifact(artifact_filepath)


def verify_contracts(contracts: List[ContractInstance]) -> None:
    explorer = networks.provider.network.explorer
    for instance in contracts:
        print(f"(i) Verifying {instance.contract_type.name} at {instance.address}...")
        explorer.publish_contract(instance.address)


def constructor_params_filepath_from_network(network_name: str) -> Path:
    filepath = CONSTRUCTOR_PARAMS_DIR / f"{network_name}.yml"
    if not filepath.exists():
        raise ValueError(f"No constructor parameters found for network '{network_name}'")
    return filepath


def registry_filepath_from_network(network_name: str) -> Path:
    filepath = ARTIFACTS_DIR / f"{network_name}.json"
    if not filepath.exists():
        raise ValueError(f"No registry found for network '{network_name}'")
    return filepath
