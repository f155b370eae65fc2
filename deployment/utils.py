import json
import os
from pathlib import Path
from typing import Dict, NamedTuple

import requests

from deployment.constants import (
    CHAIN_CONFIG_FILENAME,
    FACTORY_CONFIG_FILENAME,
    GAUGES_CONFIG_FILENAME,
    MIN_MNEMONIC_LENGTH,
    MNEMONIC_ENVVAR,
    MULTI_HOP_CONFIG_FILENAME,
    WASM_FILENAMES,
)

NODE_REQUEST_TIMEOUT = 20  # seconds

REQUIRED_CHAIN_CONFIG_KEYS = ["chainId", "prefix", "gasPrice", "feeToken", "rpcEndpoint"]

STANDARD_CONFIG_JSON_FORMAT = {"indent": 4}


class ConfigFilepaths(NamedTuple):
    chain: Path
    factory: Path
    multi_hop: Path
    gauges: Path

    @classmethod
    def from_dir(cls, configs_dir: Path) -> "ConfigFilepaths":
        configs_dir = Path(configs_dir)
        return cls(
            chain=configs_dir / CHAIN_CONFIG_FILENAME,
            factory=configs_dir / FACTORY_CONFIG_FILENAME,
            multi_hop=configs_dir / MULTI_HOP_CONFIG_FILENAME,
            gauges=configs_dir / GAUGES_CONFIG_FILENAME,
        )


def get_mnemonic() -> str:
    """Reads the deployer mnemonic from the environment."""
    mnemonic = os.environ.get(MNEMONIC_ENVVAR)
    if not mnemonic or len(mnemonic) < MIN_MNEMONIC_LENGTH:
        raise ValueError(f"Must set {MNEMONIC_ENVVAR} to a 12 word phrase")
    return mnemonic.strip()


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def read_json_config(filepath: Path) -> dict:
    if not Path(filepath).exists():
        raise FileNotFoundError(f"Config file not found at {filepath}")
    return _load_json(filepath)


def write_json_config(filepath: Path, data: dict) -> Path:
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_CONFIG_JSON_FORMAT)
    print(f"Updated {filepath}")
    return filepath


def validate_chain_config(config: Dict) -> Dict:
    """Checks that the chain connection config carries every required field."""
    print("Validating chain config...")
    for key in REQUIRED_CHAIN_CONFIG_KEYS:
        if not config.get(key):
            raise ValueError(f"{key} is not set in chain config.")

    constants = config.get("constants") or dict()
    for name in constants:
        if not name.isupper():
            raise ValueError(f"Constant '{name}' must be upper case.")

    return config


def get_wasm_filepath(wasm_dir: Path, contract: str) -> Path:
    try:
        filename = WASM_FILENAMES[contract]
    except KeyError:
        raise ValueError(f"No wasm binary known for contract '{contract}'.")
    filepath = Path(wasm_dir) / filename
    if not filepath.exists():
        raise FileNotFoundError(f"Wasm binary for {contract} not found at {filepath}")
    return filepath


def query_node_chain_id(rpc_endpoint: str) -> str:
    """Returns the chain ID reported by the node's tendermint RPC status endpoint."""
    url = f"{rpc_endpoint.rstrip('/')}/status"
    response = requests.get(url, timeout=NODE_REQUEST_TIMEOUT)
    response.raise_for_status()

    data = response.json()
    # some gateways return the bare result without the jsonrpc envelope
    result = data.get("result", data)
    return result["node_info"]["network"]
