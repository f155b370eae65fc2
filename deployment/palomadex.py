"""
The PalomaDEX deployment: DEX contracts (token, pairs, stake, factory, multi-hop),
the DAO that governs them and the reward gauges, in the order they depend on each other.
"""

import base64
import copy
import json
from typing import Dict, List

from deployment.constants import (
    CREATE_GAUGE_GAS_LIMIT,
    CREATE_PAIR_GAS_LIMIT,
    CW4_STAKE,
    DAO_CONTRACTS,
    DAO_CORE,
    DAO_CORE_GAS_LIMIT,
    DAO_CORE_LABEL,
    DAO_DESCRIPTION,
    DAO_IMAGE_URL,
    DAO_NAME,
    DEX_CONTRACTS,
    FACTORY,
    GAUGE_ADAPTER,
    GAUGE_ADAPTER_GAS_LIMIT,
    GAUGE_ORCHESTRATOR,
    MAX_VOTING_PERIOD,
    MIN_BOND,
    MIN_VOTING_PERIOD,
    MULTI_HOP,
    PAIR,
    PAIR_STABLE,
    PROPOSAL_DEPOSIT,
    PROPOSAL_MODULE_LABEL,
    PROPOSAL_SINGLE,
    STAKE,
    TOKEN,
    TOKEN_DECIMALS,
    TOKEN_INITIAL_BALANCE,
    TOKEN_LABEL,
    TOKEN_NAME,
    TOKEN_SYMBOL,
    TOKENS_PER_POWER,
    UNBONDING_PERIOD,
    VOTING_MODULE_LABEL,
)
from deployment.events import parse_created_pairs, wasm_events
from deployment.params import Deployer
from deployment.report import DeploymentReport
from deployment.utils import ConfigFilepaths, read_json_config


class NoWasmEvents(Exception):
    """Raised when a factory transaction emits no wasm events"""


def _encode_message(message: Dict) -> str:
    """Nested instantiate messages are passed as base64 encoded JSON."""
    return base64.b64encode(json.dumps(message).encode()).decode()


def store_contracts(deployer: Deployer, contract_names: List[str]) -> Dict[str, int]:
    code_ids = dict()
    for contract_name in contract_names:
        code_ids[contract_name] = deployer.store(contract_name)
    return code_ids


def update_factory_config(
    factory_config: Dict,
    token_code_id: int,
    pair_code_id: int,
    pair_stable_code_id: int,
    stake_code_id: int,
) -> Dict:
    """Writes the code IDs the factory instantiates pairs and stakes from into its config."""
    factory_config = copy.deepcopy(factory_config)
    instantiate = factory_config["instantiate"]
    pair_configs = instantiate.get("pair_configs") or list()
    if len(pair_configs) < 2:
        raise ValueError("Factory config requires a pair and a stable pair config.")

    instantiate["token_code_id"] = token_code_id
    pair_configs[0]["code_id"] = pair_code_id
    pair_configs[1]["code_id"] = pair_stable_code_id
    instantiate.setdefault("default_stake_config", dict())["staking_code_id"] = stake_code_id
    return factory_config


def token_instantiate_msg(owner: str) -> Dict:
    """CW20 token with a high initial balance for the deployer, who is also the minter."""
    return {
        "name": TOKEN_NAME,
        "symbol": TOKEN_SYMBOL,
        "decimals": TOKEN_DECIMALS,
        "initial_balances": [{"address": owner, "amount": TOKEN_INITIAL_BALANCE}],
        "mint": {"minter": owner, "cap": None},
        "marketing": None,
    }


def create_pairs_and_distribution_flows(
    deployer: Deployer, factory_config: Dict, factory_address: str
) -> List[Dict[str, str]]:
    print("Executing CreatePairAndDistributionFlows message...")

    pairs = list()
    for message in factory_config.get("create_pairs") or list():
        receipt = deployer.execute(factory_address, message, gas_limit=CREATE_PAIR_GAS_LIMIT)
        if not wasm_events(receipt.events):
            result = json.dumps(receipt._asdict(), indent=2)
            print(f"No 'wasm' events found. Full result:\n{result}")
            raise NoWasmEvents("No 'wasm' events found.")

        for pair_info in parse_created_pairs(receipt.events):
            print(f"Pair initialized:\n{json.dumps(pair_info, indent=4)}\n")
            pairs.append(pair_info)

    return pairs


def dao_core_instantiate_msg(
    deployer_address: str,
    cw4_stake_code_id: int,
    proposal_single_code_id: int,
    cw20_contract: str,
) -> Dict:
    voting_module_msg = {
        "cw20_contract": cw20_contract,
        "tokens_per_power": TOKENS_PER_POWER,
        "min_bond": MIN_BOND,
        "stake_config": [
            {
                "unbonding_period": UNBONDING_PERIOD,
                "voting_multiplier": "1.0",
                "reward_multiplier": "1.0",
            }
        ],
        "admin": None,
    }
    proposal_module_msg = {
        "threshold": {
            "threshold_quorum": {
                "quorum": {"majority": {}},
                "threshold": {"majority": {}},
            }
        },
        "max_voting_period": {"time": MAX_VOTING_PERIOD},
        "min_voting_period": {"time": MIN_VOTING_PERIOD},
        "allow_revoting": True,
        "deposit_info": {
            "token": {"token": {"address": cw20_contract}},
            "deposit": PROPOSAL_DEPOSIT,
            "refund_failed_proposals": True,
        },
        "executor": {"Only": deployer_address},
    }
    return {
        "admin": None,
        "name": DAO_NAME,
        "description": DAO_DESCRIPTION,
        "image_url": DAO_IMAGE_URL,
        "automatically_add_cw20s": True,
        "automatically_add_cw721s": True,
        "voting_module_instantiate_info": {
            "code_id": cw4_stake_code_id,
            "msg": _encode_message(voting_module_msg),
            "admin": {"none": {}},
            "label": VOTING_MODULE_LABEL,
        },
        "proposal_modules_instantiate_info": [
            {
                "code_id": proposal_single_code_id,
                "msg": _encode_message(proposal_module_msg),
                "admin": {"none": {}},
                "label": PROPOSAL_MODULE_LABEL,
            }
        ],
        "initial_items": [],
    }


def instantiate_dao_core_with_modules(
    deployer: Deployer,
    dao_core_code_id: int,
    cw4_stake_code_id: int,
    proposal_single_code_id: int,
    cw20_contract: str,
) -> str:
    print("Instantiating DAO Core with modules...")
    message = dao_core_instantiate_msg(
        deployer_address=deployer.get_address(),
        cw4_stake_code_id=cw4_stake_code_id,
        proposal_single_code_id=proposal_single_code_id,
        cw20_contract=cw20_contract,
    )
    dao_core_address = deployer.instantiate(
        {"label": DAO_CORE_LABEL, "instantiate": message},
        dao_core_code_id,
        name=DAO_CORE,
        gas_limit=DAO_CORE_GAS_LIMIT,
        admin=None,
    )
    print(
        "DAO Core and its modules have been successfully instantiated. "
        f"DAO Core Address: {dao_core_address}"
    )
    return dao_core_address


def update_gauges_config(gauges_config: Dict, owner: str, factory_address: str) -> Dict:
    gauges_config = copy.deepcopy(gauges_config)
    gauges_config["orchestrator"]["instantiate"]["owner"] = owner
    for adapter in gauges_config.get("adapters") or list():
        adapter["instantiate"]["factory"] = factory_address
    return gauges_config


def assign_gauge_adapter(gauges_config: Dict, adapter_address: str) -> Dict:
    gauges_config = copy.deepcopy(gauges_config)
    for gauge in gauges_config.get("gauges") or list():
        gauge["create_gauge"]["adapter"] = adapter_address
    return gauges_config


def instantiate_gauge_adapters(
    deployer: Deployer, code_id: int, adapter_configs: List[Dict]
) -> List[Dict[str, str]]:
    print("Instantiating gauge adapters...")
    adapters = list()
    for config in adapter_configs:
        address = deployer.instantiate(config, code_id, gas_limit=GAUGE_ADAPTER_GAS_LIMIT)
        adapters.append({"label": config["label"], "address": address})
    return adapters


def create_gauges(
    deployer: Deployer, messages: List[Dict], gauge_orchestrator_address: str
) -> List[str]:
    """Creates a gauge per message and returns the titles of the created gauges."""
    print("Executing CreateGauge message...")
    titles = list()
    for message in messages:
        deployer.execute(
            gauge_orchestrator_address,
            message,
            gas_limit=CREATE_GAUGE_GAS_LIMIT,
            tolerate_client_quirk=True,
        )
        title = message["create_gauge"].get("title")
        print(f"Gauge initialized: {title}\n")
        titles.append(title)
    return titles


def deploy_palomadex(deployer: Deployer, configs: ConfigFilepaths) -> DeploymentReport:
    """
    Uploads and instantiates every contract, wires their addresses into one another
    and returns the report of the deployment. Each step depends on the previous ones.
    """
    deployer_address = deployer.get_address()
    factory_config = read_json_config(configs.factory)

    # stake, pair and pair-stable are required for the factory's instantiation
    code_ids = store_contracts(deployer, DEX_CONTRACTS)
    for name in (TOKEN, PAIR, PAIR_STABLE, STAKE):
        print(f"{name} code_id: {code_ids[name]}")

    factory_config = update_factory_config(
        factory_config,
        token_code_id=code_ids[TOKEN],
        pair_code_id=code_ids[PAIR],
        pair_stable_code_id=code_ids[PAIR_STABLE],
        stake_code_id=code_ids[STAKE],
    )
    factory_config = deployer.checkpoint(configs.factory, factory_config)

    token_address = deployer.instantiate(
        {"label": TOKEN_LABEL, "instantiate": token_instantiate_msg(deployer_address)},
        code_ids[TOKEN],
        name=TOKEN,
    )
    print(f"CW20 token contract instantiated at {token_address}")

    factory_address = deployer.instantiate(factory_config, code_ids[FACTORY], name=FACTORY)

    multi_hop_config = read_json_config(configs.multi_hop)
    multi_hop_config["instantiate"]["palomadex_factory"] = factory_address
    multi_hop_config = deployer.checkpoint(configs.multi_hop, multi_hop_config)
    multi_hop_address = deployer.instantiate(multi_hop_config, code_ids[MULTI_HOP], name=MULTI_HOP)

    pairs = create_pairs_and_distribution_flows(deployer, factory_config, factory_address)

    # DAO: dao-core, proposal-single and the stake contract as voting module
    code_ids.update(store_contracts(deployer, DAO_CONTRACTS))
    dao_core_address = instantiate_dao_core_with_modules(
        deployer,
        dao_core_code_id=code_ids[DAO_CORE],
        cw4_stake_code_id=code_ids[CW4_STAKE],
        proposal_single_code_id=code_ids[PROPOSAL_SINGLE],
        cw20_contract=token_address,
    )

    gauges_config = update_gauges_config(
        read_json_config(configs.gauges), owner=deployer_address, factory_address=factory_address
    )
    gauge_orchestrator_address = deployer.instantiate(
        gauges_config["orchestrator"], code_ids[GAUGE_ORCHESTRATOR], name=GAUGE_ORCHESTRATOR
    )
    gauge_adapters = instantiate_gauge_adapters(
        deployer, code_ids[GAUGE_ADAPTER], gauges_config.get("adapters") or list()
    )

    if gauges_config.get("gauges"):
        if not gauge_adapters:
            raise ValueError("Gauges are configured but no gauge adapter was instantiated.")
        gauges_config = assign_gauge_adapter(gauges_config, gauge_adapters[0]["address"])
    gauges_config = deployer.checkpoint(configs.gauges, gauges_config)

    gauges = create_gauges(
        deployer, gauges_config.get("gauges") or list(), gauge_orchestrator_address
    )

    return DeploymentReport(
        chain_id=deployer.connection.chain_id,
        deployer=deployer_address,
        token_code_id=code_ids[TOKEN],
        pair_code_id=code_ids[PAIR],
        pair_stable_code_id=code_ids[PAIR_STABLE],
        stake_code_id=code_ids[STAKE],
        multi_hop_code_id=code_ids[MULTI_HOP],
        factory_code_id=code_ids[FACTORY],
        gauge_orchestrator_code_id=code_ids[GAUGE_ORCHESTRATOR],
        gauge_adapter_code_id=code_ids[GAUGE_ADAPTER],
        dao_core_code_id=code_ids[DAO_CORE],
        proposal_single_code_id=code_ids[PROPOSAL_SINGLE],
        cw4_stake_code_id=code_ids[CW4_STAKE],
        token_address=token_address,
        factory_address=factory_address,
        multi_hop_address=multi_hop_address,
        pairs=pairs,
        dao_core=dao_core_address,
        gauge_orchestrator_address=gauge_orchestrator_address,
        gauge_adapters=gauge_adapters,
        gauges=gauges,
    )
