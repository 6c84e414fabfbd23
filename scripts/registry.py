#!/usr/bin/python3
from pathlib import Path

import click

from wallet_deployment.constants import CONTRACT_BUILD_DIR
from wallet_deployment.registry import merge_registries, normalize_registry
from wallet_deployment.truffle import convert_truffle_artifacts

existing_registry = click.Path(dir_okay=False, exists=True, path_type=Path)
new_registry = click.Path(dir_okay=False, exists=False, path_type=Path)


@click.group()
def cli():
    """Registry maintenance: merge, normalize and import from truffle."""


@cli.command()
@click.argument("registries", nargs=2, type=existing_registry)
@click.option("--output-registry", "-o", type=new_registry, required=True)
@click.option(
    "--deprecated-contract",
    "-d",
    "deprecated_contracts",
    help="Contract to leave out of the merged registry; repeatable",
    multiple=True,
)
def merge(registries, output_registry, deprecated_contracts):
    """Merge two registries; conflicting entries are resolved interactively."""
    registry_1, registry_2 = registries
    merge_registries(
        registry_1_filepath=registry_1,
        registry_2_filepath=registry_2,
        output_filepath=output_registry,
        deprecated_contracts=list(deprecated_contracts),
    )


@cli.command()
@click.argument("registry", type=existing_registry)
def normalize(registry):
    """Rewrite a registry in place in the standard order and format."""
    normalize_registry(registry)


@cli.command("import-truffle")
@click.option(
    "--build-dir",
    "-b",
    help="Directory of truffle build artifacts",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=CONTRACT_BUILD_DIR,
)
@click.option("--chain-id", "-c", type=click.IntRange(min=1), required=True)
@click.option(
    "--network-id",
    "-n",
    help="Truffle network id, if different from the chain id",
    required=False,
)
@click.option("--output-registry", "-o", type=new_registry, required=True)
def import_truffle(build_dir, chain_id, network_id, output_registry):
    """Create a registry from contracts deployed by truffle migrations."""
    convert_truffle_artifacts(
        directory=build_dir,
        chain_id=chain_id,
        output_filepath=output_registry,
        network_id=network_id,
    )


if __name__ == "__main__":
    cli()
