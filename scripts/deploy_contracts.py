#!/usr/bin/python3

import click
from ape import networks
from ape.cli import ConnectedProviderCommand, account_option, network_option

from wallet_deployment.migration import run_migration
from wallet_deployment.options import autosign_option, constructor_params_option, verify_option
from wallet_deployment.utils import constructor_params_filepath_from_network


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@constructor_params_option
@verify_option
@autosign_option
def cli(network, account, constructor_params_filepath, verify, autosign):
    """
    Deploys SimpleStorage and a MultiSignatureWallet.

    The wallet owners and required confirmations come from the constructor
    parameters file; by default the one named after the network, e.g.

    ape run deploy_contracts --network ethereum:local:test
    """
    filepath = constructor_params_filepath or constructor_params_filepath_from_network(
        networks.provider.network.name
    )
    run_migration(filepath, verify=verify, account=account, autosign=autosign)


if __name__ == "__main__":
    cli()
