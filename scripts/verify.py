#!/usr/bin/python3
from pathlib import Path

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, network_option

from wallet_deployment.migration import MIGRATION_CONTRACTS
from wallet_deployment.networks import check_explorer_plugin
from wallet_deployment.registry import contracts_from_registry
from wallet_deployment.utils import registry_filepath_from_network, verify_contracts


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@click.option(
    "--contract-name",
    "-c",
    "contract_names",
    help="Contract to verify; defaults to all migrated contracts",
    multiple=True,
    default=MIGRATION_CONTRACTS,
)
@click.option(
    "--registry-filepath",
    "-f",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="Registry filepath; defaults to the registry named after the network",
    required=False,
)
def cli(network, contract_names, registry_filepath):
    """Publish the sources of registered contracts to the block explorer."""
    check_explorer_plugin()
    registry_filepath = registry_filepath or registry_filepath_from_network(
        networks.provider.network.name
    )
    chain_id = networks.provider.chain_id
    registered = contracts_from_registry(registry_filepath, chain_id=chain_id)

    missing = [name for name in contract_names if name not in registered]
    if missing:
        raise click.BadOptionUsage(
            option_name="--contract-name",
            message=f"{', '.join(missing)} not in {registry_filepath} for chain {chain_id}",
        )
    verify_contracts([registered[name] for name in contract_names])


if __name__ == "__main__":
    cli()
