#!/usr/bin/python3

import json

import click

from deployment.networks import connect
from deployment.options import (
    autoconfirm_option,
    configs_dir_option,
    gas_price_option,
    output_option,
    wasm_dir_option,
)
from deployment.palomadex import deploy_palomadex
from deployment.params import Deployer
from deployment.utils import ConfigFilepaths, get_mnemonic, read_json_config


def run(configs_dir, wasm_dir, output, autoconfirm, gas_price=None):
    mnemonic = get_mnemonic()

    configs = ConfigFilepaths.from_dir(configs_dir)
    chain_config = read_json_config(configs.chain)
    if gas_price:
        chain_config["gasPrice"] = str(gas_price)
    print(f"Using paloma config:\n{json.dumps(chain_config, indent=4)}\n")

    connection = connect(mnemonic, chain_config)
    deployer = Deployer(
        connection=connection,
        chain_config=chain_config,
        wasm_dir=wasm_dir,
        report_filepath=output,
        autoconfirm=autoconfirm,
    )

    report = deploy_palomadex(deployer, configs=configs)
    return deployer.finalize(report)


@click.command()
@configs_dir_option
@wasm_dir_option
@output_option
@gas_price_option
@autoconfirm_option
def cli(configs_dir, wasm_dir, output, gas_price, autoconfirm):
    """
    Upload, instantiate and wire up the PalomaDEX contracts,
    then save the resulting code IDs and addresses.
    """
    try:
        run(
            configs_dir=configs_dir,
            wasm_dir=wasm_dir,
            output=output,
            autoconfirm=autoconfirm,
            gas_price=gas_price,
        )
    except Exception as e:
        click.secho(f"{type(e).__name__}: {e}", fg="red", err=True)
        raise SystemExit(1)

    print("All done, let the coins flow.")


if __name__ == "__main__":
    cli()
