import json
from pathlib import Path
from typing import Dict, List, NamedTuple

from deployment.utils import _load_json

STANDARD_REPORT_JSON_FORMAT = {"indent": 4}


class DeploymentReport(NamedTuple):
    """Code IDs and addresses collected during a single deployment."""

    chain_id: str
    deployer: str
    token_code_id: int
    pair_code_id: int
    pair_stable_code_id: int
    stake_code_id: int
    multi_hop_code_id: int
    factory_code_id: int
    gauge_orchestrator_code_id: int
    gauge_adapter_code_id: int
    dao_core_code_id: int
    proposal_single_code_id: int
    cw4_stake_code_id: int
    token_address: str
    factory_address: str
    multi_hop_address: str
    pairs: List[Dict[str, str]]
    dao_core: str
    gauge_orchestrator_address: str
    gauge_adapters: List[Dict[str, str]]
    gauges: List[str]


# report field -> key in result file
REPORT_KEYS = {
    "chain_id": "chainId",
    "deployer": "deployer",
    "token_code_id": "tokenCodeId",
    "pair_code_id": "pairCodeId",
    "pair_stable_code_id": "pairStableCodeId",
    "stake_code_id": "stakeCodeId",
    "multi_hop_code_id": "multiHopCodeId",
    "factory_code_id": "factoryCodeId",
    "gauge_orchestrator_code_id": "gaugeOrchestratorCodeId",
    "gauge_adapter_code_id": "gaugeAdapterCodeId",
    "dao_core_code_id": "daoCoreCodeId",
    "proposal_single_code_id": "proposalSingleCodeId",
    "cw4_stake_code_id": "cw4StakeCodeId",
    "token_address": "tokenAddress",
    "factory_address": "factoryAddress",
    "multi_hop_address": "multiHopAddress",
    "pairs": "pairs",
    "dao_core": "daoCore",
    "gauge_orchestrator_address": "gaugeOrchestratorAddress",
    "gauge_adapters": "gaugeAdapters",
    "gauges": "gauges",
}


def report_to_json(report: DeploymentReport) -> Dict:
    return {REPORT_KEYS[field]: value for field, value in report._asdict().items()}


def report_from_json(data: Dict) -> DeploymentReport:
    missing = [key for key in REPORT_KEYS.values() if key not in data]
    if missing:
        raise ValueError(f"Malformed report; missing {', '.join(missing)}.")
    return DeploymentReport(**{field: data[key] for field, key in REPORT_KEYS.items()})


def read_report(filepath: Path) -> DeploymentReport:
    return report_from_json(_load_json(filepath))


def validate_report_filepath(filepath: Path, chain_id: str) -> Path:
    """
    Checks that the deployment has not already been reported for
    the chain_id of the current connection.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        return filepath

    existing_chain_id = _load_json(filepath).get(REPORT_KEYS["chain_id"])
    if existing_chain_id == chain_id:
        raise ValueError(
            f"Deployment is already reported for chain_id {chain_id} at {filepath}."
        )
    return filepath


def write_report(report: DeploymentReport, filepath: Path) -> Path:
    """Writes the deployment report; an existing report is never overwritten."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if filepath.exists():
        filepath = filepath.with_suffix(".unmerged.json")
        print(
            "Report file already exists.\n"
            f"Writing to {filepath} to avoid overwriting existing data."
        )

    with open(filepath, "w") as file:
        json.dump(report_to_json(report), file, **STANDARD_REPORT_JSON_FORMAT)

    print(f"Result was saved to {filepath} file!")
    return filepath
