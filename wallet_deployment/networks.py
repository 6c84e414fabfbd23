import os

from ape import networks

from wallet_deployment.constants import LOCAL_NETWORKS


def is_local_network() -> bool:
    """Returns True if the connected network is a local development network."""
    return networks.provider.network.name in LOCAL_NETWORKS


def check_explorer_plugin() -> None:
    """Publishing needs ape-etherscan and an API key for the connected ecosystem."""
    try:
        from ape_etherscan.utils import API_KEY_ENV_KEY_MAP
    except ImportError:
        raise ImportError("Install the ape-etherscan plugin to verify contracts.")

    ecosystem = networks.provider.network.ecosystem.name
    envvar = API_KEY_ENV_KEY_MAP.get(ecosystem)
    if not envvar:
        raise ValueError(f"No block explorer API key known for ecosystem '{ecosystem}'.")
    if not os.environ.get(envvar):
        raise ValueError(f"{envvar} is not set.")


def check_provider_plugin() -> None:
    """An infura provider needs one of the project id variables ape-infura reads."""
    if networks.provider.name != "infura":
        return
    try:
        from ape_infura.provider import _ENVIRONMENT_VARIABLE_NAMES
    except ImportError:
        raise ImportError("Install the ape-infura plugin to deploy through infura.")

    if not any(os.environ.get(envvar) for envvar in _ENVIRONMENT_VARIABLE_NAMES):
        names = ", ".join(_ENVIRONMENT_VARIABLE_NAMES)
        raise ValueError(f"No Infura API key found in environment variables: {names}")


def check_plugins(verify: bool) -> None:
    if is_local_network():
        return
    print("Checking plugins...")
    check_provider_plugin()
    if verify:
        check_explorer_plugin()
