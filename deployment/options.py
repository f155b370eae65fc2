from pathlib import Path

import click

from deployment.constants import ARTIFACTS_DIR, CONFIGS_DIR, RESULT_FILENAME, WASM_DIR
from deployment.types import GasPriceType

configs_dir_option = click.option(
    "--configs-dir",
    "-c",
    help="Directory holding the chain and contract JSON configs.",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=CONFIGS_DIR,
    show_default=True,
)

wasm_dir_option = click.option(
    "--wasm-dir",
    "-w",
    help="Directory holding the compiled wasm binaries.",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    default=WASM_DIR,
    show_default=True,
)

output_option = click.option(
    "--output",
    "-o",
    help="Filepath of the deployment report.",
    type=click.Path(dir_okay=False, path_type=Path),
    default=ARTIFACTS_DIR / RESULT_FILENAME,
    show_default=True,
)

report_option = click.option(
    "--report",
    "-r",
    help="Filepath of a deployment report.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=ARTIFACTS_DIR / RESULT_FILENAME,
    show_default=True,
)

autoconfirm_option = click.option(
    "--autoconfirm",
    help="Send every transaction without asking for confirmation.",
    is_flag=True,
    default=False,
)

gas_price_option = click.option(
    "--gas-price",
    "-g",
    help="Overrides the gas price of the chain config, e.g. 0.01ugrain.",
    type=GasPriceType(),
    required=False,
)
