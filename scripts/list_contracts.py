#!/usr/bin/python3

import click

from deployment.options import report_option
from deployment.report import DeploymentReport, read_report

CODE_ID_FIELDS = [
    "token_code_id",
    "pair_code_id",
    "pair_stable_code_id",
    "stake_code_id",
    "multi_hop_code_id",
    "factory_code_id",
    "gauge_orchestrator_code_id",
    "gauge_adapter_code_id",
    "dao_core_code_id",
    "proposal_single_code_id",
    "cw4_stake_code_id",
]

ADDRESS_FIELDS = [
    "token_address",
    "factory_address",
    "multi_hop_address",
    "dao_core",
    "gauge_orchestrator_address",
]


def _format_field_name(field: str) -> str:
    """Format a report field to capitalize each word."""
    return " ".join(word.capitalize() for word in field.split("_"))


def _display_report(report: DeploymentReport) -> None:
    click.secho(f"\nChain {report.chain_id}", fg="green")
    click.secho(f"    Deployer {report.deployer}", fg="yellow")

    click.secho("    Code IDs", fg="yellow")
    for index, field in enumerate(CODE_ID_FIELDS, start=1):
        code_id = getattr(report, field)
        click.secho(f"        {index}. {_format_field_name(field)} {code_id}", fg="cyan")

    click.secho("    Contracts", fg="yellow")
    for index, field in enumerate(ADDRESS_FIELDS, start=1):
        address = getattr(report, field)
        click.secho(f"        {index}. {_format_field_name(field)} {address}", fg="cyan")

    click.secho("    Pairs", fg="yellow")
    for index, pair in enumerate(report.pairs, start=1):
        click.secho(f"        {index}. {pair['pairName']} {pair['pairAddress']}", fg="cyan")

    click.secho("    Gauge Adapters", fg="yellow")
    for index, adapter in enumerate(report.gauge_adapters, start=1):
        click.secho(f"        {index}. {adapter['label']} {adapter['address']}", fg="cyan")

    click.secho("    Gauges", fg="yellow")
    for index, title in enumerate(report.gauges, start=1):
        click.secho(f"        {index}. {title}", fg="cyan")


@click.command(name="list-contracts")
@report_option
def cli(report):
    """List all code IDs and contracts of a deployment report."""
    _display_report(read_report(report))


if __name__ == "__main__":
    cli()
