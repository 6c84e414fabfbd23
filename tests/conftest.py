import json

import pytest
import yaml

from wallet_deployment.constants import MULTISIG_WALLET, SIMPLE_STORAGE

# Common constants
NUM_OWNERS = 5
REQUIRED_CONFIRMATIONS = 3

# Init code that deploys a single STOP opcode as runtime code, whatever the
# constructor arguments appended to it.
#   PUSH1 0x01 PUSH1 0x0c PUSH1 0x00 CODECOPY PUSH1 0x01 PUSH1 0x00 RETURN | STOP
STUB_DEPLOYMENT_BYTECODE = "0x6001600c60003960016000f300"
STUB_RUNTIME_BYTECODE = "0x00"

SIMPLE_STORAGE_ABI = [
    {
        "type": "function",
        "name": "set",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "x", "type": "uint256", "internalType": "uint256"}],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "get",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256", "internalType": "uint256"}],
    },
]

MULTISIG_WALLET_ABI = [
    {
        "type": "constructor",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_owners", "type": "address[]", "internalType": "address[]"},
            {"name": "_required", "type": "uint256", "internalType": "uint256"},
        ],
    },
    {
        "type": "function",
        "name": "required",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256", "internalType": "uint256"}],
    },
]


# Utility functions
def write_artifact(build_dir, name, abi, networks=None):
    artifact = {
        "contractName": name,
        "abi": abi,
        "bytecode": STUB_DEPLOYMENT_BYTECODE,
        "deployedBytecode": STUB_RUNTIME_BYTECODE,
        "networks": networks or {},
    }
    filepath = build_dir / f"{name}.json"
    with open(filepath, "w") as file:
        json.dump(artifact, file)
    return filepath


# Fixtures
@pytest.fixture
def creator(accounts):
    return accounts[0]


@pytest.fixture
def owners(accounts):
    return [account.address for account in accounts[:NUM_OWNERS]]


@pytest.fixture
def build_dir(tmp_path):
    build_dir = tmp_path / "build" / "contracts"
    build_dir.mkdir(parents=True)
    write_artifact(build_dir, SIMPLE_STORAGE, SIMPLE_STORAGE_ABI)
    write_artifact(build_dir, MULTISIG_WALLET, MULTISIG_WALLET_ABI)
    return build_dir


@pytest.fixture
def deployment_config(tmp_path, chain, build_dir):
    return {
        "deployment": {"name": "multisig-wallet-test", "chain_id": chain.chain_id},
        "artifacts": {
            "dir": str(tmp_path / "artifacts"),
            "filename": "test.json",
            "build_dir": str(build_dir),
        },
        "constants": {"REQUIRED_CONFIRMATIONS": REQUIRED_CONFIRMATIONS},
        "contracts": [
            SIMPLE_STORAGE,
            {
                MULTISIG_WALLET: {
                    "constructor": {
                        "_owners": [f"$account:{i}" for i in range(NUM_OWNERS)],
                        "_required": "$REQUIRED_CONFIRMATIONS",
                    }
                }
            },
        ],
    }


@pytest.fixture
def deployment_config_file(tmp_path, deployment_config):
    filepath = tmp_path / "test.yml"
    with open(filepath, "w") as file:
        yaml.safe_dump(deployment_config, file)
    return filepath
