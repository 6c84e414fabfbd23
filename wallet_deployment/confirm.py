from collections import OrderedDict
from typing import List

from ape.utils import ZERO_ADDRESS


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _ask(question: str) -> None:
    answer = input(f"{question} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_deployment(contract_name: str) -> None:
    """Asks the user to confirm the deployment of a single contract."""
    _ask(f"Deploy {contract_name}")


def _continue() -> None:
    """Asks the user to continue."""
    _ask("Continue")


def _confirm_zero_address() -> None:
    _ask("Zero Address detected for deployment parameter; Continue?")


def _confirm_resolution(resolved_params: OrderedDict, contract_name: str) -> None:
    """Asks the user to confirm the resolved constructor parameters for a single contract."""
    if len(resolved_params) == 0:
        print(f"\n(i) No constructor parameters for {contract_name}")
        _confirm_deployment(contract_name)
        return

    print(f"\nConstructor parameters for {contract_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = _contains(resolved_value, ZERO_ADDRESS)
    _confirm_deployment(contract_name)
    if contains_zero_address:
        _confirm_zero_address()


def _contains(value, target) -> bool:
    if isinstance(value, list):
        return any(_contains(v, target) for v in value)
    return value == target


def _print_wallet_parameters(owners: List[str], required: int) -> None:
    print(f"\nMultisig wallet: {required} of {len(owners)} confirmations required")
    for index, owner in enumerate(owners):
        print(f"\towner[{index}]={owner}")
