from pathlib import Path

import click
from eth_utils import to_checksum_address


def _checksum_owners(ctx, param, values):
    owners = []
    for value in values:
        try:
            owners.append(to_checksum_address(value))
        except ValueError:
            raise click.BadParameter(f"{value} is not a valid ethereum address")
    return tuple(owners)


constructor_params_option = click.option(
    "--constructor-params",
    "-p",
    "constructor_params_filepath",
    help="Constructor parameters YAML; defaults to the file named after the network",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

verify_option = click.option(
    "--verify/--no-verify",
    help="Publish deployed contracts to the block explorer",
    default=False,
)

autosign_option = click.option(
    "--autosign",
    help="Automatically sign transactions and skip confirmations",
    is_flag=True,
    default=False,
)

owners_option = click.option(
    "--owner",
    "-o",
    "owners",
    help="Owner address of the multisig wallet; repeat for each owner",
    multiple=True,
    required=True,
    callback=_checksum_owners,
)

required_option = click.option(
    "--required",
    "-r",
    help="Number of owner confirmations required to execute a transaction",
    required=True,
    type=click.IntRange(min=1),
)
