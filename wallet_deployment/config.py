from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from ape import networks

from wallet_deployment.constants import ARTIFACTS_DIR, CONTRACT_BUILD_DIR
from wallet_deployment.networks import is_local_network
from wallet_deployment.utils import _load_json, _load_yaml


class DeploymentConfig(NamedTuple):
    """
    A constructor parameters file:

        deployment:  name and chain_id
        artifacts:   dir and filename of the registry; optional build_dir
                     of compiled contracts
        constants:   values referenced as $UPPER_CASE
        contracts:   ordered list of contract names, each optionally
                     mapped to its constructor parameters
    """

    name: str
    chain_id: int
    registry_filepath: Path
    build_dir: Path
    constants: Dict[str, Any]
    contracts: "OrderedDict[str, OrderedDict]"
    path: Optional[Path] = None

    class Invalid(ValueError):
        """Raised when a constructor parameters file is malformed or unusable"""

    @classmethod
    def from_yaml(cls, filepath: Path) -> "DeploymentConfig":
        print(f"Validating parameters YAML {filepath}...")
        return cls.from_dict(_load_yaml(filepath), path=filepath)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], path: Optional[Path] = None) -> "DeploymentConfig":
        deployment = data.get("deployment") or {}
        chain_id = deployment.get("chain_id")
        if not chain_id:
            raise cls.Invalid("chain_id is not set in params file.")

        artifacts = data.get("artifacts") or {}
        filename = artifacts.get("filename")
        if not filename:
            raise cls.Invalid("artifact filename is not set in params file.")

        return cls(
            name=deployment.get("name", filename),
            chain_id=int(chain_id),
            registry_filepath=Path(artifacts.get("dir", ARTIFACTS_DIR)) / filename,
            build_dir=Path(artifacts.get("build_dir", CONTRACT_BUILD_DIR)),
            constants=data.get("constants") or {},
            contracts=_parse_contracts(data.get("contracts")),
            path=path,
        )

    def contract_names(self) -> List[str]:
        return list(self.contracts)

    def check_chain(self) -> None:
        """Local networks accept any chain_id; live networks must match it."""
        provider_chain_id = networks.provider.chain_id
        if self.chain_id != provider_chain_id and not is_local_network():
            raise self.Invalid(
                f"chain_id in params file ({self.chain_id}) does not match "
                f"chain_id of current network ({provider_chain_id})."
            )

    def check_registry(self) -> Path:
        """
        Returns the registry filepath, refusing a live chain that is already
        published there. Local chains are rebuilt from scratch on every run,
        so their entries are replaced instead.
        """
        if is_local_network() or not self.registry_filepath.exists():
            return self.registry_filepath

        provider_chain_id = networks.provider.chain_id
        published = {int(chain_id) for chain_id in _load_json(self.registry_filepath)}
        if provider_chain_id in published:
            raise self.Invalid(f"Deployment is already published for chain_id {provider_chain_id}.")
        return self.registry_filepath


def _parse_contracts(entries: Any) -> "OrderedDict[str, OrderedDict]":
    if not entries:
        raise DeploymentConfig.Invalid("Constructor parameters file missing 'contracts' field.")

    contracts = OrderedDict()
    for entry in entries:
        if isinstance(entry, str):
            name, settings = entry, {}
        elif isinstance(entry, dict) and len(entry) == 1:
            ((name, settings),) = entry.items()
            settings = settings or {}
        else:
            raise DeploymentConfig.Invalid(f"Malformed contract entry {entry!r}.")

        if name in contracts:
            raise DeploymentConfig.Invalid(f"{name} is listed more than once.")
        constructor = settings.get("constructor") or {}
        if not isinstance(constructor, dict):
            raise DeploymentConfig.Invalid(f"Malformed constructor parameters for {name}.")
        contracts[name] = OrderedDict(constructor)

    return contracts
