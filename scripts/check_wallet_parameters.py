#!/usr/bin/python3

import click

from wallet_deployment.confirm import _print_wallet_parameters
from wallet_deployment.options import owners_option, required_option
from wallet_deployment.wallet import WalletParameters


@click.command()
@owners_option
@required_option
def cli(owners, required):
    """Check multisig wallet owners and required confirmations without deploying."""
    try:
        wallet_parameters = WalletParameters(owners=list(owners), required=required).validate()
    except WalletParameters.Invalid as e:
        raise click.BadParameter(str(e))
    _print_wallet_parameters(wallet_parameters.owners, wallet_parameters.required)
    print("(i) Wallet parameters are valid")


if __name__ == "__main__":
    cli()
