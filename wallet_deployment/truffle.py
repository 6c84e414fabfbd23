import os
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import urlencode

import requests
from eth_utils import to_checksum_address, to_int

from wallet_deployment.constants import ETHERSCAN_API_KEY_ENVVAR, EXPLORER_API_NETWORKS
from wallet_deployment.registry import ChainId, RegistryEntry, write_registry
from wallet_deployment.utils import _load_json


def get_transaction_info(api_key: str, chain_id: ChainId, tx_hash: str) -> Tuple[int, str]:
    """Returns the block number and sender of a transaction, using the block explorer API."""
    try:
        network, explorer = EXPLORER_API_NETWORKS[chain_id]
    except KeyError:
        raise ValueError(f"No block explorer API known for chain id {chain_id}")

    params = {
        "module": "proxy",
        "action": "eth_getTransactionByHash",
        "txhash": tx_hash,
        "apikey": api_key,
    }
    url = f"https://api{network}.{explorer}/api?{urlencode(params)}"
    response = requests.get(url)
    response.raise_for_status()

    tx = response.json().get("result")
    if not isinstance(tx, dict) or not tx.get("blockNumber"):
        raise ValueError(f"Could not find mined transaction {tx_hash} on chain {chain_id}")

    block_number = to_int(hexstr=tx["blockNumber"])
    return block_number, to_checksum_address(tx["from"])


def _truffle_entry(
    filepath: Path, network_id: str, chain_id: ChainId, api_key: str
) -> Optional[RegistryEntry]:
    data = _load_json(filepath=filepath)
    deployment = data.get("networks", {}).get(network_id)
    if not deployment:
        return None

    name = data.get("contractName") or filepath.stem
    tx_hash = deployment["transactionHash"]
    block_number, deployer = get_transaction_info(
        api_key=api_key, chain_id=chain_id, tx_hash=tx_hash
    )
    return RegistryEntry(
        chain_id=chain_id,
        name=name,
        address=to_checksum_address(deployment["address"]),
        abi=data["abi"],
        tx_hash=tx_hash,
        block_number=block_number,
        deployer=deployer,
    )


def convert_truffle_artifacts(
    directory: Path,
    chain_id: ChainId,
    output_filepath: Path,
    network_id: Optional[str] = None,
) -> Path:
    """
    Converts truffle build artifacts (build/contracts/*.json) into a registry.

    Truffle records deployments per network id, which is not always the
    chain id (e.g. ganache); it defaults to the chain id.
    Artifacts without a deployment on that network are skipped.
    """
    if output_filepath.exists():
        raise FileExistsError(f"Registry already exists at {output_filepath}")

    if not directory.exists():
        raise FileNotFoundError(f"Directory not found at {directory}")

    api_key = os.environ.get(ETHERSCAN_API_KEY_ENVVAR)
    if not api_key:
        raise ValueError(f"Please set the {ETHERSCAN_API_KEY_ENVVAR} environment variable.")

    network_id = str(network_id or chain_id)
    entries = list()
    for filepath in sorted(directory.glob("*.json")):
        entry = _truffle_entry(filepath, network_id=network_id, chain_id=chain_id, api_key=api_key)
        if entry is None:
            print(f"(i) Skipping {filepath.name}; not deployed on network {network_id}")
            continue
        entries.append(entry)

    if not entries:
        raise ValueError(f"No deployments found for network {network_id} in {directory}")

    write_registry(entries=entries, filepath=output_filepath)
    print(f"Converted truffle artifacts to {output_filepath}")
    return output_filepath
