#!/usr/bin/python3

import click

from deployment.networks import connect
from deployment.options import configs_dir_option
from deployment.utils import ConfigFilepaths, get_mnemonic, read_json_config


@click.command()
@configs_dir_option
def cli(configs_dir):
    """Derive the deployer account and check the chain connection."""
    chain_config = read_json_config(ConfigFilepaths.from_dir(configs_dir).chain)
    connection = connect(get_mnemonic(), chain_config)
    click.secho(f"Deployer {connection.address} on {connection.chain_id}", fg="green")


if __name__ == "__main__":
    cli()
