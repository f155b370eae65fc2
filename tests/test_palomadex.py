import base64
import json

import pytest

from deployment.constants import (
    CREATE_GAUGE_GAS_LIMIT,
    CREATE_PAIR_GAS_LIMIT,
    DAO_CORE_GAS_LIMIT,
    TOLERATED_CLIENT_ERROR,
    UPLOAD_GAS_LIMIT,
)
from deployment.chain import ExecuteReceipt
from deployment.events import TxEvent
from deployment.palomadex import (
    NoWasmEvents,
    assign_gauge_adapter,
    create_gauges,
    create_pairs_and_distribution_flows,
    dao_core_instantiate_msg,
    deploy_palomadex,
    update_factory_config,
    update_gauges_config,
)
from deployment.utils import read_json_config
from tests.conftest import CHAIN_ID, DEPLOYER_ADDRESS

UPLOAD_ORDER = [
    "cw20_base.wasm",
    "palomadex_pair.wasm",
    "palomadex_pair_lsd.wasm",
    "palomadex_stake.wasm",
    "palomadex_factory.wasm",
    "palomadex_multi_hop.wasm",
    "gauge_orchestrator.wasm",
    "gauge_adapter.wasm",
    "dao_dao_core.wasm",
    "dao_proposal_single.wasm",
    "palomadex_stake.wasm",
]


def _decode(encoded):
    return json.loads(base64.b64decode(encoded))


def test_update_factory_config(config_filepaths):
    factory_config = read_json_config(config_filepaths.factory)
    updated = update_factory_config(
        factory_config, token_code_id=1, pair_code_id=2, pair_stable_code_id=3, stake_code_id=4
    )
    instantiate = updated["instantiate"]
    assert instantiate["token_code_id"] == 1
    assert instantiate["pair_configs"][0]["code_id"] == 2
    assert instantiate["pair_configs"][1]["code_id"] == 3
    assert instantiate["default_stake_config"]["staking_code_id"] == 4

    # input config is not modified
    assert factory_config["instantiate"]["token_code_id"] == 0


def test_update_factory_config_requires_two_pair_configs():
    factory_config = {"instantiate": {"pair_configs": [{"code_id": 0}]}}
    with pytest.raises(ValueError, match="pair and a stable pair"):
        update_factory_config(factory_config, 1, 2, 3, 4)


def test_dao_core_instantiate_msg():
    message = dao_core_instantiate_msg(
        deployer_address=DEPLOYER_ADDRESS,
        cw4_stake_code_id=11,
        proposal_single_code_id=10,
        cw20_contract="paloma1token",
    )
    assert message["admin"] is None

    voting = message["voting_module_instantiate_info"]
    assert voting["code_id"] == 11
    assert voting["admin"] == {"none": {}}
    voting_msg = _decode(voting["msg"])
    assert voting_msg["cw20_contract"] == "paloma1token"
    assert voting_msg["stake_config"][0]["unbonding_period"] == 86400

    (proposal,) = message["proposal_modules_instantiate_info"]
    assert proposal["code_id"] == 10
    proposal_msg = _decode(proposal["msg"])
    assert proposal_msg["executor"] == {"Only": DEPLOYER_ADDRESS}
    assert proposal_msg["deposit_info"]["token"]["token"]["address"] == "paloma1token"
    assert proposal_msg["max_voting_period"] == {"time": 604800}


def test_update_gauges_config(config_filepaths):
    gauges_config = read_json_config(config_filepaths.gauges)
    updated = update_gauges_config(gauges_config, owner=DEPLOYER_ADDRESS, factory_address="f")
    assert updated["orchestrator"]["instantiate"]["owner"] == DEPLOYER_ADDRESS
    assert all(a["instantiate"]["factory"] == "f" for a in updated["adapters"])

    assigned = assign_gauge_adapter(updated, "paloma1adapter")
    assert all(g["create_gauge"]["adapter"] == "paloma1adapter" for g in assigned["gauges"])
    assert updated["gauges"][0]["create_gauge"]["adapter"] == ""


def test_create_pairs_requires_wasm_events(deployer, monkeypatch):
    def execute(*args, **kwargs):
        return ExecuteReceipt(
            tx_hash="X", height=1, gas_used=1, events=[TxEvent(type="message", attributes=[])]
        )

    monkeypatch.setattr(deployer, "execute", execute)
    factory_config = {"create_pairs": [{"create_pair_and_distribution_flows": {}}]}
    with pytest.raises(NoWasmEvents):
        create_pairs_and_distribution_flows(deployer, factory_config, "paloma1factory")


def test_create_pairs(deployer, chain_client):
    factory_config = {
        "create_pairs": [
            {"create_pair_and_distribution_flows": {"asset_infos": []}},
            {"create_pair_and_distribution_flows": {"asset_infos": []}},
        ]
    }
    pairs = create_pairs_and_distribution_flows(deployer, factory_config, "paloma1factory")
    assert pairs == [
        {"pairName": "ugrain-token1", "pairAddress": "paloma1pair1"},
        {"pairName": "ugrain-token2", "pairAddress": "paloma1pair2"},
    ]
    assert {e["gas_limit"] for e in chain_client.executions} == {CREATE_PAIR_GAS_LIMIT}


def test_create_gauges_tolerates_client_quirk(deployer, chain_client):
    chain_client.execute_error = RuntimeError(TOLERATED_CLIENT_ERROR)
    messages = [
        {"create_gauge": {"title": "Rewards A"}},
        {"create_gauge": {"title": "Rewards B"}},
    ]
    assert create_gauges(deployer, messages, "paloma1orchestrator") == ["Rewards A", "Rewards B"]
    assert len(chain_client.executions) == 2
    assert chain_client.executions[0]["gas_limit"] == CREATE_GAUGE_GAS_LIMIT


def test_create_gauges_propagates_other_errors(deployer, chain_client):
    chain_client.execute_error = RuntimeError("account sequence mismatch")
    with pytest.raises(RuntimeError, match="sequence mismatch"):
        create_gauges(deployer, [{"create_gauge": {"title": "A"}}], "paloma1orchestrator")


def test_deploy_palomadex(deployer, chain_client, config_filepaths, wasm_dir):
    report = deploy_palomadex(deployer, configs=config_filepaths)

    # uploads
    assert [u["path"].name for u in chain_client.uploads] == UPLOAD_ORDER
    assert {u["gas_limit"] for u in chain_client.uploads} == {UPLOAD_GAS_LIMIT}
    assert report.token_code_id == 1
    assert report.pair_code_id == 2
    assert report.pair_stable_code_id == 3
    assert report.stake_code_id == 4
    assert report.factory_code_id == 5
    assert report.multi_hop_code_id == 6
    assert report.gauge_orchestrator_code_id == 7
    assert report.gauge_adapter_code_id == 8
    assert report.dao_core_code_id == 9
    assert report.proposal_single_code_id == 10
    assert report.cw4_stake_code_id == 11

    # instantiation order: token, factory, multi hop, dao core, orchestrator, adapter
    token, factory, multi_hop, dao_core, orchestrator, adapter = chain_client.instantiations
    assert token["code_id"] == 1
    assert token["message"]["initial_balances"] == [
        {"address": DEPLOYER_ADDRESS, "amount": "1000000000"}
    ]
    assert report.token_address == "paloma1contract1"

    # factory config threaded with code IDs and variables resolved
    assert factory["code_id"] == 5
    assert factory["message"]["token_code_id"] == 1
    assert factory["message"]["pair_configs"][0]["code_id"] == 2
    assert factory["message"]["pair_configs"][1]["code_id"] == 3
    assert factory["message"]["default_stake_config"]["staking_code_id"] == 4
    assert factory["message"]["owner"] == DEPLOYER_ADDRESS
    assert factory["message"]["fee_address"].startswith("paloma1")
    assert report.factory_address == "paloma1contract2"

    saved_factory_config = read_json_config(config_filepaths.factory)
    assert saved_factory_config["instantiate"]["token_code_id"] == 1
    # variables stay variables on disk
    assert saved_factory_config["instantiate"]["owner"] == "$deployer"

    assert multi_hop["message"] == {"palomadex_factory": report.factory_address}
    assert read_json_config(config_filepaths.multi_hop)["instantiate"] == {
        "palomadex_factory": report.factory_address
    }
    assert report.multi_hop_address == "paloma1contract3"

    # pairs created on the factory with the token address
    create_pair = chain_client.executions[0]
    assert create_pair["contract_address"] == report.factory_address
    asset_infos = create_pair["message"]["create_pair_and_distribution_flows"]["asset_infos"]
    assert {"cw20_token": report.token_address} in asset_infos
    assert report.pairs == [{"pairName": "ugrain-token1", "pairAddress": "paloma1pair1"}]

    # dao
    assert dao_core["code_id"] == 9
    assert dao_core["admin"] is None
    assert dao_core["gas_limit"] == DAO_CORE_GAS_LIMIT
    voting_info = dao_core["message"]["voting_module_instantiate_info"]
    assert voting_info["code_id"] == 11
    assert _decode(voting_info["msg"])["cw20_contract"] == report.token_address
    assert report.dao_core == "paloma1contract4"

    # gauges
    assert orchestrator["message"]["owner"] == DEPLOYER_ADDRESS
    assert orchestrator["message"]["voting_powers"] == report.dao_core
    assert orchestrator["admin"] == DEPLOYER_ADDRESS
    assert adapter["message"]["factory"] == report.factory_address
    assert report.gauge_orchestrator_address == "paloma1contract5"
    assert report.gauge_adapters == [
        {"label": "PalomaDEX Gauge Adapter", "address": "paloma1contract6"}
    ]

    create_gauge = chain_client.executions[-1]
    assert create_gauge["contract_address"] == report.gauge_orchestrator_address
    assert create_gauge["message"]["create_gauge"]["adapter"] == "paloma1contract6"
    saved_gauges_config = read_json_config(config_filepaths.gauges)
    assert saved_gauges_config["gauges"][0]["create_gauge"]["adapter"] == "paloma1contract6"
    assert report.gauges == ["PalomaDEX Rewards"]

    assert report.chain_id == CHAIN_ID
    assert report.deployer == DEPLOYER_ADDRESS

    report_filepath = deployer.finalize(report)
    assert read_json_config(report_filepath)["gaugeOrchestratorAddress"] == "paloma1contract5"


def test_deploy_palomadex_gauges_without_adapter(deployer, config_filepaths):
    gauges_config = read_json_config(config_filepaths.gauges)
    gauges_config["adapters"] = []
    with open(config_filepaths.gauges, "w") as file:
        json.dump(gauges_config, file)

    with pytest.raises(ValueError, match="no gauge adapter"):
        deploy_palomadex(deployer, configs=config_filepaths)
