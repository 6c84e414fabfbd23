from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional

from ape import accounts, networks
from ape.api import AccountAPI
from ape.cli.choices import select_account
from ape.contracts import ContractContainer, ContractInstance
from ape_accounts import KeyfileAccount
from web3.auto import w3

from wallet_deployment.config import DeploymentConfig
from wallet_deployment.confirm import _confirm_resolution, _continue, _print_wallet_parameters
from wallet_deployment.constants import MULTISIG_WALLET
from wallet_deployment.networks import check_plugins, is_local_network
from wallet_deployment.registry import registry_from_ape_deployments
from wallet_deployment.utils import get_contract_container, verify_contracts
from wallet_deployment.wallet import WalletParameters

VARIABLE_PREFIX = "$"


class Variable(ABC):
    """A constructor parameter whose value is only known once connected."""

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @staticmethod
    def is_variable(value: Any) -> bool:
        return isinstance(value, str) and value.startswith(VARIABLE_PREFIX)


class DeployerAccount(Variable):
    NAME = "deployer"

    def __init__(self, account: AccountAPI):
        self.account = account

    def resolve(self) -> Any:
        return self.account.address


class Constant(Variable):
    def __init__(self, name: str, constants: Dict[str, Any]):
        if name not in constants:
            raise ValueError(f"Constant '{name}' not found in deployment file.")
        self.name = name
        self.value = constants[name]

    def resolve(self) -> Any:
        return self.value


class AccountIndex(Variable):
    """
    The N-th test account of a local network ($account:N). Live networks
    have no such list, so their configs must spell owner addresses out.
    """

    PREFIX = "account:"

    def __init__(self, raw_index: str):
        try:
            self.index = int(raw_index)
        except ValueError:
            raise ValueError(f"Invalid account index '{raw_index}'")
        if self.index < 0:
            raise ValueError(f"Account index must not be negative, got {self.index}")

    def resolve(self) -> Any:
        if not is_local_network():
            raise ValueError(
                f"$account:{self.index} can only be resolved on a local network; "
                f"use an explicit address for {networks.provider.network.name}"
            )
        test_accounts = accounts.test_accounts
        if self.index >= len(test_accounts):
            raise ValueError(
                f"Account index {self.index} is out of range; "
                f"{len(test_accounts)} test accounts available"
            )
        return test_accounts[self.index].address


def parse_value(value: Any, constants: Dict[str, Any], deployer: AccountAPI) -> Any:
    """Replaces the variables of a raw YAML value, recursing into lists."""
    if isinstance(value, list):
        return [parse_value(item, constants, deployer) for item in value]
    if not Variable.is_variable(value):
        return value

    name = value[len(VARIABLE_PREFIX) :]
    if name == DeployerAccount.NAME:
        return DeployerAccount(deployer)
    if name.startswith(AccountIndex.PREFIX):
        return AccountIndex(name[len(AccountIndex.PREFIX) :])
    if name.isupper():
        return Constant(name, constants)
    raise ValueError(f"Unknown variable '{value}'")


def resolve_value(value: Any) -> Any:
    if isinstance(value, list):
        return [resolve_value(item) for item in value]
    if isinstance(value, Variable):
        return value.resolve()
    return value


def check_constructor_inputs(container: ContractContainer, resolved_params: OrderedDict) -> None:
    """Resolved parameters must name the constructor inputs in order, with encodable values."""
    contract_name = container.contract_type.name
    abi_inputs = container.constructor.abi.inputs

    expected = [abi_input.name for abi_input in abi_inputs]
    given = list(resolved_params)
    if given != expected:
        raise ConstructorParameters.Invalid(
            f"{contract_name} constructor takes ({', '.join(expected)}), "
            f"got ({', '.join(given)})"
        )

    for abi_input in abi_inputs:
        value = resolved_params[abi_input.name]
        if not w3.is_encodable(abi_input.type, value):
            raise ConstructorParameters.Invalid(
                f"{contract_name} parameter {abi_input.name}={value!r} "
                f"is not a valid '{abi_input.type}'"
            )


class ConstructorParameters:
    """Constructor parameters of every contract in a deployment, in deployment order."""

    class Invalid(Exception):
        """Raised when constructor parameters do not fit the contract's constructor"""

    def __init__(self, parameters: "OrderedDict[str, OrderedDict]"):
        self.parameters = parameters

    @classmethod
    def from_config(cls, config: DeploymentConfig, deployer: AccountAPI) -> "ConstructorParameters":
        print("Processing contract constructor parameters...")
        parameters = OrderedDict()
        for contract_name, raw_params in config.contracts.items():
            parameters[contract_name] = OrderedDict(
                (name, parse_value(value, config.constants, deployer))
                for name, value in raw_params.items()
            )
        return cls(parameters)

    def contract_names(self) -> List[str]:
        return list(self.parameters)

    def resolve(self, contract_name: str) -> OrderedDict:
        try:
            parameters = self.parameters[contract_name]
        except KeyError:
            raise ValueError(f"Contract {contract_name} is not part of this deployment.")
        return OrderedDict((name, resolve_value(value)) for name, value in parameters.items())

    def check(self, containers: Dict[str, ContractContainer]) -> None:
        for contract_name, container in containers.items():
            check_constructor_inputs(container, self.resolve(contract_name))


class Deployer:
    """
    Deploys the contracts of a deployment config from one account.

    Everything that can be checked before sending is checked on construction:
    the network, the registry, every constructor against its ABI, and the
    wallet owners and threshold.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        verify: bool,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        check_plugins(verify=verify)
        config.check_chain()
        self.config = config
        self.verify = verify
        self.registry_filepath = config.check_registry()

        self.account = account or select_account()
        self.autosign = autosign
        if autosign:
            print("WARNING: Autosign is enabled; transactions will be signed without confirmation.")
        # test accounts always sign unprompted
        if isinstance(self.account, KeyfileAccount):
            self.account.set_autosign(autosign)

        self.containers = OrderedDict(
            (name, get_contract_container(name, config.build_dir))
            for name in config.contract_names()
        )
        self.constructor_parameters = ConstructorParameters.from_config(config, self.account)
        self.constructor_parameters.check(self.containers)

        self.wallet_parameters = None
        if MULTISIG_WALLET in self.containers:
            self.wallet_parameters = self._check_wallet_parameters()

        self._print_deployment_info()
        if not autosign:
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        return cls(DeploymentConfig.from_yaml(filepath), *args, **kwargs)

    def get_container(self, contract_name: str) -> ContractContainer:
        try:
            return self.containers[contract_name]
        except KeyError:
            raise ValueError(f"Contract {contract_name} is not part of this deployment.")

    def _check_wallet_parameters(self) -> WalletParameters:
        resolved_params = self.constructor_parameters.resolve(MULTISIG_WALLET)
        wallet_parameters = WalletParameters.from_resolved_params(resolved_params).validate()
        _print_wallet_parameters(wallet_parameters.owners, wallet_parameters.required)
        return wallet_parameters

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        resolved_params = self.constructor_parameters.resolve(contract_name)
        if not self.autosign:
            _confirm_resolution(resolved_params, contract_name)

        instance = self.account.deploy(container, *resolved_params.values(), publish=self.verify)
        print(f"(i) {contract_name} deployed to {instance.address}")
        return instance

    def finalize(self, deployments: List[ContractInstance]) -> Path:
        """Records the deployments in the registry, then publishes them if verifying."""
        registry_filepath = registry_from_ape_deployments(
            deployments,
            output_filepath=self.registry_filepath,
            overwrite=is_local_network(),
        )
        if self.verify:
            verify_contracts(deployments)
        return registry_filepath

    def _print_deployment_info(self) -> None:
        print(
            f"Account: {self.account.address}",
            f"Config: {self.config.path or self.config.name}",
            f"Registry: {self.registry_filepath}",
            f"Verify: {self.verify}",
            f"Network: {networks.provider.network.ecosystem.name}:{networks.provider.network.name}",
            f"Chain ID: {networks.provider.chain_id}",
            sep="\n",
        )
