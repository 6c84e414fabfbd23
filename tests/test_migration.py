import pytest

from tests.conftest import NUM_OWNERS, REQUIRED_CONFIRMATIONS
from wallet_deployment import config as config_module
from wallet_deployment.config import DeploymentConfig
from wallet_deployment.constants import MULTISIG_WALLET, SIMPLE_STORAGE
from wallet_deployment.migration import MIGRATION_CONTRACTS, deploy_contracts
from wallet_deployment.params import Deployer
from wallet_deployment.registry import read_registry
from wallet_deployment.wallet import WalletParameters


def make_deployer(deployment_config, account, autosign=True):
    return Deployer(
        config=DeploymentConfig.from_dict(deployment_config),
        verify=False,
        account=account,
        autosign=autosign,
    )


@pytest.fixture
def deployer(deployment_config, creator):
    return make_deployer(deployment_config, creator)


def test_deployer_checks_wallet_parameters(deployer, owners, creator):
    assert deployer.wallet_parameters == WalletParameters(
        owners=owners, required=REQUIRED_CONFIRMATIONS
    )
    assert deployer.account == creator
    assert list(deployer.containers) == MIGRATION_CONTRACTS


@pytest.mark.parametrize("required", [0, NUM_OWNERS + 1])
def test_invalid_threshold_fails_before_deployment(deployment_config, creator, tmp_path, required):
    deployment_config["constants"]["REQUIRED_CONFIRMATIONS"] = required
    with pytest.raises(WalletParameters.Invalid):
        make_deployer(deployment_config, creator)
    assert not (tmp_path / "artifacts" / "test.json").exists()


def test_deployer_owner_variable(deployment_config, creator):
    wallet_constructor = deployment_config["contracts"][1][MULTISIG_WALLET]["constructor"]
    wallet_constructor["_owners"] = ["$deployer", "$account:1", "$account:2"]
    deployer = make_deployer(deployment_config, creator)
    assert deployer.wallet_parameters.owners[0] == creator.address


def test_deploy_contracts(deployer, chain):
    deployments = deploy_contracts(deployer)

    assert MIGRATION_CONTRACTS == [SIMPLE_STORAGE, MULTISIG_WALLET]
    assert [d.contract_type.name for d in deployments] == MIGRATION_CONTRACTS
    for instance in deployments:
        assert chain.provider.get_code(instance.address)

    deployer.finalize(deployments)

    entries = {entry.name: entry for entry in read_registry(deployer.registry_filepath)}
    assert set(entries) == {SIMPLE_STORAGE, MULTISIG_WALLET}
    for instance in deployments:
        entry = entries[instance.contract_type.name]
        assert entry.address == instance.address
        assert entry.chain_id == chain.chain_id
        assert entry.deployer == deployer.account.address


def test_test_account_deploys_with_confirmations(deployment_config, creator, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _: "y")
    deployer = make_deployer(deployment_config, creator, autosign=False)
    deployments = deploy_contracts(deployer)
    assert [d.contract_type.name for d in deployments] == MIGRATION_CONTRACTS


def test_local_redeploy_replaces_registry_entries(deployment_config, creator, chain):
    first = make_deployer(deployment_config, creator)
    first.finalize(deploy_contracts(first))

    second = make_deployer(deployment_config, creator)
    deployments = deploy_contracts(second)
    registry_filepath = second.finalize(deployments)

    assert registry_filepath == second.registry_filepath
    assert not registry_filepath.with_suffix(".unmerged.json").exists()
    registered = {entry.name: entry.address for entry in read_registry(registry_filepath)}
    assert registered == {d.contract_type.name: d.address for d in deployments}


def test_live_deployment_is_published_once_per_chain(
    deployer, deployment_config, creator, monkeypatch
):
    deployer.finalize(deploy_contracts(deployer))

    monkeypatch.setattr(config_module, "is_local_network", lambda: False)
    with pytest.raises(DeploymentConfig.Invalid, match="already published"):
        make_deployer(deployment_config, creator)
