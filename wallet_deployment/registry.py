import json
from collections import defaultdict
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

from ape import networks
from ape.contracts import ContractInstance
from eth_typing import ABI, ChecksumAddress
from eth_utils import to_checksum_address

from wallet_deployment.constants import CONTRACT_BUILD_DIR
from wallet_deployment.utils import _load_json, get_contract_container

ChainId = int
ContractName = str


REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """A deployed contract as recorded in a registry file."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: str
    block_number: int
    deployer: str

    @classmethod
    def from_json(cls, chain_id: ChainId, name: ContractName, data: dict) -> "RegistryEntry":
        return cls(
            chain_id=int(chain_id),
            name=name,
            address=data["address"],
            abi=data["abi"],
            tx_hash=data["tx_hash"],
            block_number=data["block_number"],
            deployer=data["deployer"],
        )

    @classmethod
    def from_instance(cls, instance: ContractInstance, name: Optional[ContractName] = None):
        receipt = instance.receipt
        abi = [
            item.model_dump(mode="json", by_alias=True, exclude_none=True)
            for item in instance.contract_type.abi
        ]
        return cls(
            chain_id=networks.provider.chain_id,
            name=name or instance.contract_type.name,
            address=to_checksum_address(instance.address),
            abi=abi,
            tx_hash=receipt.txn_hash,
            block_number=receipt.block_number,
            deployer=receipt.transaction.sender,
        )

    def to_json(self) -> dict:
        return {
            "address": self.address,
            "abi": sorted(self.abi, key=lambda item: (item["type"], item.get("name", ""))),
            "tx_hash": self.tx_hash,
            "block_number": int(self.block_number),
            "deployer": self.deployer,
        }


class Registry:
    """Registry entries indexed by chain id, then by contract name."""

    def __init__(self, entries: Iterable[RegistryEntry] = ()):
        self._chains: Dict[ChainId, Dict[ContractName, RegistryEntry]] = defaultdict(dict)
        for entry in entries:
            self.add(entry)

    @classmethod
    def from_file(cls, filepath: Path) -> "Registry":
        data = _load_json(filepath)
        return cls(
            RegistryEntry.from_json(chain_id, name, artifact)
            for chain_id, contracts in data.items()
            for name, artifact in contracts.items()
        )

    def __len__(self) -> int:
        return sum(len(contracts) for contracts in self._chains.values())

    @property
    def chain_ids(self) -> Set[ChainId]:
        return {chain_id for chain_id, contracts in self._chains.items() if contracts}

    def add(self, entry: RegistryEntry) -> None:
        self._chains[entry.chain_id][entry.name] = entry

    def get(self, chain_id: ChainId, name: ContractName) -> Optional[RegistryEntry]:
        return self._chains.get(chain_id, {}).get(name)

    def drop_chain(self, chain_id: ChainId) -> None:
        self._chains.pop(chain_id, None)

    def without(self, names: Iterable[ContractName]) -> "Registry":
        excluded = set(names)
        return Registry(entry for entry in self.entries() if entry.name not in excluded)

    def entries(self) -> List[RegistryEntry]:
        """Entries in file order: chain id (as text), then contract name."""
        return sorted(
            (entry for contracts in self._chains.values() for entry in contracts.values()),
            key=lambda entry: (str(entry.chain_id), entry.name),
        )

    def to_json(self) -> dict:
        data = dict()
        for entry in self.entries():
            data.setdefault(str(entry.chain_id), dict())[entry.name] = entry.to_json()
        return data

    def write(self, filepath: Path) -> None:
        with open(filepath, "w") as file:
            json.dump(self.to_json(), file, **REGISTRY_JSON_FORMAT)


def read_registry(filepath: Path) -> List[RegistryEntry]:
    return Registry.from_file(filepath).entries()


def write_registry(
    entries: List[RegistryEntry],
    filepath: Path,
    silent: bool = False,
    overwrite: bool = False,
) -> Path:
    """
    Writes entries to a registry file and returns the path written.

    An existing file gains the new chains. Chains it already holds are only
    replaced with `overwrite`; otherwise the new entries go to a sibling
    '.unmerged.json' file and the existing one is left untouched.
    """
    registry = Registry(entries)
    if not len(registry):
        print("No entries provided.")
        return filepath

    filepath.parent.mkdir(parents=True, exist_ok=True)
    if not filepath.exists():
        if not silent:
            print(f"Creating new registry at {filepath}.")
        registry.write(filepath)
        return filepath

    existing = Registry.from_file(filepath)
    overlap = existing.chain_ids & registry.chain_ids
    if overlap and not overwrite:
        filepath = filepath.with_suffix(".unmerged.json")
        if not silent:
            print(f"Chain ids {sorted(overlap)} are already registered; writing to {filepath}.")
        registry.write(filepath)
        return filepath

    if not silent:
        print(f"Updating existing registry at {filepath}.")
    for chain_id in overlap:
        existing.drop_chain(chain_id)
    for entry in registry.entries():
        existing.add(entry)
    existing.write(filepath)
    return filepath


def registry_from_ape_deployments(
    deployments: List[ContractInstance],
    output_filepath: Path,
    registry_names: Optional[Dict[ContractName, ContractName]] = None,
    overwrite: bool = False,
) -> Path:
    """Records ape deployments, optionally under different registry names."""
    registry_names = registry_names or dict()
    entries = [
        RegistryEntry.from_instance(
            instance, name=registry_names.get(instance.contract_type.name)
        )
        for instance in deployments
    ]
    output_filepath = write_registry(entries, output_filepath, overwrite=overwrite)
    print(f"(i) Registry written to {output_filepath}!")
    return output_filepath


class ConflictResolution(Enum):
    USE_1 = 1
    USE_2 = 2


def _select_conflict_resolution(
    entry_1: RegistryEntry, filepath_1: Path, entry_2: RegistryEntry, filepath_2: Path
) -> ConflictResolution:
    print(f"\n! {entry_1.name} on chain id {entry_1.chain_id} is in both registries:")
    candidates = (
        (ConflictResolution.USE_1, entry_1, filepath_1),
        (ConflictResolution.USE_2, entry_2, filepath_2),
    )
    for resolution, entry, filepath in candidates:
        print(f"[{resolution.value}]: {entry.address} from {filepath}")
    print("[A]: Abort merge")

    choices = {str(resolution.value): resolution for resolution in ConflictResolution}
    while True:
        answer = input(f"Merge resolution, {[*choices, 'A']}? ").strip()
        if answer == "A":
            print("Merge Aborted!")
            exit(-1)
        if answer in choices:
            return choices[answer]


def merge_registries(
    registry_1_filepath: Path,
    registry_2_filepath: Path,
    output_filepath: Path,
    deprecated_contracts: Optional[List[ContractName]] = None,
    force_conflict_resolution: Optional[ConflictResolution] = None,
) -> Path:
    """
    Merges two registries into a new file. Deprecated contracts are left out.
    A contract present in both for the same chain is resolved interactively
    unless a resolution is forced.
    """
    deprecated = deprecated_contracts or []
    merged = Registry.from_file(registry_1_filepath).without(deprecated)
    incoming = Registry.from_file(registry_2_filepath).without(deprecated)

    for entry_2 in incoming.entries():
        entry_1 = merged.get(entry_2.chain_id, entry_2.name)
        if entry_1 is not None:
            resolution = force_conflict_resolution or _select_conflict_resolution(
                entry_1, registry_1_filepath, entry_2, registry_2_filepath
            )
            if resolution == ConflictResolution.USE_1:
                continue
        merged.add(entry_2)

    output_filepath.parent.mkdir(parents=True, exist_ok=True)
    merged.write(output_filepath)
    print(f"Merged registry output to {output_filepath}")
    return output_filepath


def contracts_from_registry(
    filepath: Path, chain_id: ChainId, build_dir: Path = CONTRACT_BUILD_DIR
) -> Dict[ContractName, ContractInstance]:
    """Returns the contract instances recorded in a registry for a chain."""
    return {
        entry.name: get_contract_container(entry.name, build_dir).at(entry.address)
        for entry in read_registry(filepath)
        if entry.chain_id == chain_id
    }


def normalize_registry(filepath: Path) -> None:
    """Rewrites a registry file in the standard order and format."""
    registry = Registry.from_file(filepath)
    temp_filepath = filepath.with_suffix(".temp.json")
    registry.write(temp_filepath)
    temp_filepath.replace(filepath)
    print(f"Successfully normalized registry at {filepath}.")
