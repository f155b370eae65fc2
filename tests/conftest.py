import shutil
from decimal import Decimal

import pytest

from deployment.chain import ExecuteReceipt, InstantiateReceipt, StoreReceipt
from deployment.constants import CONFIGS_DIR, WASM_FILENAMES
from deployment.events import TxEvent
from deployment.networks import Connection
from deployment.params import Deployer
from deployment.types import GasPrice
from deployment.utils import ConfigFilepaths, read_json_config

# Common constants
CHAIN_ID = "paloma-testnet-15"
DEPLOYER_ADDRESS = "paloma1deployer0000000000000000000000000000"
GAS_PRICE = GasPrice(amount=Decimal("0.01"), denom="ugrain")


class FakeWallet:
    def __init__(self, address=DEPLOYER_ADDRESS):
        self._address = address

    def address(self):
        return self._address


class FakeChainClient:
    """Records every transaction and answers with deterministic code IDs and addresses."""

    def __init__(self, gas_price=GAS_PRICE):
        self.gas_price = gas_price
        self.uploads = list()
        self.instantiations = list()
        self.executions = list()
        self.execute_error = None

    def balance(self, address, denom):
        return 1_000_000

    def upload(self, sender, wasm_filepath, gas_limit, memo=None):
        self.uploads.append(dict(path=wasm_filepath, gas_limit=gas_limit, memo=memo))
        code_id = len(self.uploads)
        return StoreReceipt(code_id=code_id, tx_hash=f"UPLOAD{code_id}", height=100, gas_used=1)

    def instantiate(self, sender, code_id, message, label, gas_limit, memo=None, admin=None):
        self.instantiations.append(
            dict(
                code_id=code_id,
                message=message,
                label=label,
                gas_limit=gas_limit,
                memo=memo,
                admin=admin,
            )
        )
        address = f"paloma1contract{len(self.instantiations)}"
        return InstantiateReceipt(address=address, tx_hash="INSTANTIATE", height=101, gas_used=1)

    def execute(self, sender, contract_address, message, gas_limit, memo=None):
        self.executions.append(
            dict(contract_address=contract_address, message=message, gas_limit=gas_limit)
        )
        if self.execute_error:
            raise self.execute_error

        index = len(self.executions)
        events = [TxEvent(type="execute", attributes=[("_contract_address", contract_address)])]
        if "create_pair_and_distribution_flows" in message:
            events.extend(
                [
                    TxEvent(type="wasm", attributes=[("action", "create_pair")]),
                    TxEvent(
                        type=" wasm",
                        attributes=[
                            ("action", "register"),
                            ("pair", f"ugrain-token{index}"),
                            ("pair_contract_addr", f"paloma1pair{index}"),
                        ],
                    ),
                ]
            )
        return ExecuteReceipt(tx_hash=f"EXECUTE{index}", height=102, gas_used=1, events=events)


# Fixtures
@pytest.fixture
def chain_client():
    return FakeChainClient()


@pytest.fixture
def connection(chain_client):
    return Connection(
        client=chain_client, wallet=FakeWallet(), address=DEPLOYER_ADDRESS, chain_id=CHAIN_ID
    )


@pytest.fixture
def wasm_dir(tmp_path):
    wasm_dir = tmp_path / "wasm"
    wasm_dir.mkdir()
    for filename in set(WASM_FILENAMES.values()):
        (wasm_dir / filename).write_bytes(b"\x00asm")
    return wasm_dir


@pytest.fixture
def configs_dir(tmp_path):
    configs_dir = tmp_path / "configs"
    shutil.copytree(CONFIGS_DIR, configs_dir)
    return configs_dir


@pytest.fixture
def config_filepaths(configs_dir):
    return ConfigFilepaths.from_dir(configs_dir)


@pytest.fixture
def chain_config(config_filepaths):
    return read_json_config(config_filepaths.chain)


@pytest.fixture
def report_filepath(tmp_path):
    return tmp_path / "artifacts" / "result.json"


@pytest.fixture
def deployer(connection, chain_config, wasm_dir, report_filepath):
    return Deployer(
        connection=connection,
        chain_config=chain_config,
        wasm_dir=wasm_dir,
        report_filepath=report_filepath,
        autoconfirm=True,
    )
