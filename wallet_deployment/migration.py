from pathlib import Path
from typing import List, Optional

from ape.api import AccountAPI
from ape.contracts import ContractInstance

from wallet_deployment.constants import MULTISIG_WALLET, SIMPLE_STORAGE
from wallet_deployment.params import Deployer

# deployment order
MIGRATION_CONTRACTS = [SIMPLE_STORAGE, MULTISIG_WALLET]


def deploy_contracts(deployer: Deployer) -> List[ContractInstance]:
    """
    Deploys SimpleStorage, then the MultiSignatureWallet with the owners and
    required confirmations of the deployer's config. Deployments are sent one
    after the other; any failure propagates and stops the migration.
    """
    return [deployer.deploy(deployer.get_container(name)) for name in MIGRATION_CONTRACTS]


def run_migration(
    filepath: Path,
    verify: bool = False,
    account: Optional[AccountAPI] = None,
    autosign: bool = False,
) -> List[ContractInstance]:
    deployer = Deployer.from_yaml(filepath, verify=verify, account=account, autosign=autosign)
    deployments = deploy_contracts(deployer)
    deployer.finalize(deployments)
    return deployments
