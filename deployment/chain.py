from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional

from cosmpy.aerial.client import LedgerClient, NetworkConfig
from cosmpy.aerial.client.utils import prepare_and_broadcast_basic_transaction
from cosmpy.aerial.contract.cosmwasm import (
    create_cosmwasm_execute_msg,
    create_cosmwasm_instantiate_msg,
    create_cosmwasm_store_code_msg,
)
from cosmpy.aerial.tx import Transaction
from cosmpy.aerial.wallet import Wallet
from cosmpy.crypto.address import Address
from cosmpy.protos.cosmos.tx.v1beta1.service_pb2 import GetTxRequest

from deployment.events import TxEvent, find_event_attribute, normalize_events
from deployment.types import GasPrice

CLIENT_URL_SCHEMES = ("rest+", "grpc+")


class StoreReceipt(NamedTuple):
    code_id: int
    tx_hash: str
    height: int
    gas_used: int


class InstantiateReceipt(NamedTuple):
    address: str
    tx_hash: str
    height: int
    gas_used: int


class ExecuteReceipt(NamedTuple):
    tx_hash: str
    height: int
    gas_used: int
    events: List[TxEvent]


def _client_url(endpoint: str) -> str:
    """The client library expects the transport as a prefix of the endpoint URL."""
    if endpoint.startswith(CLIENT_URL_SCHEMES):
        return endpoint
    return f"rest+{endpoint}"


def network_config_from_chain_config(config: Dict) -> NetworkConfig:
    gas_price = GasPrice.from_string(config["gasPrice"])
    endpoint = config.get("restEndpoint") or config["rpcEndpoint"]
    return NetworkConfig(
        chain_id=config["chainId"],
        url=_client_url(endpoint),
        fee_minimum_gas_price=float(gas_price.amount),
        fee_denomination=gas_price.denom,
        staking_denomination=config["feeToken"],
    )


class ChainClient:
    """
    Wraps the CosmWasm upload/instantiate/execute operations of the ledger client
    and returns plain receipts.
    """

    class TransactionFailed(Exception):
        """Raised when a transaction is committed with a non-zero result code"""

    def __init__(self, ledger: LedgerClient, gas_price: GasPrice):
        self.ledger = ledger
        self.gas_price = gas_price

    @classmethod
    def from_config(cls, config: Dict) -> "ChainClient":
        network_config = network_config_from_chain_config(config)
        ledger = LedgerClient(network_config)
        return cls(ledger=ledger, gas_price=GasPrice.from_string(config["gasPrice"]))

    def balance(self, address: str, denom: str) -> int:
        return self.ledger.query_bank_balance(Address(address), denom=denom)

    def _broadcast(self, sender: Wallet, message: Any, gas_limit: int, memo: Optional[str]):
        tx = Transaction()
        tx.add_message(message)
        submitted = prepare_and_broadcast_basic_transaction(
            self.ledger, tx, sender, gas_limit=gas_limit, memo=memo
        )
        submitted.wait_to_complete()

        response = submitted.response
        if response.code != 0:
            raise self.TransactionFailed(
                f"Transaction {response.hash} failed with code {response.code}: {response.raw_log}"
            )
        return response

    def _events(self, response) -> List[TxEvent]:
        """
        Returns the events of a committed transaction in emission order.
        The parsed response of the ledger client merges all events of one type,
        so they are read from the raw transaction instead.
        """
        tx = self.ledger.txs.GetTx(GetTxRequest(hash=response.hash))
        return normalize_events(tx.tx_response.events)

    def upload(
        self, sender: Wallet, wasm_filepath: Path, gas_limit: int, memo: Optional[str] = None
    ) -> StoreReceipt:
        message = create_cosmwasm_store_code_msg(str(wasm_filepath), sender.address())
        response = self._broadcast(sender, message, gas_limit=gas_limit, memo=memo)

        events = self._events(response)
        code_id = find_event_attribute(events, "store_code", "code_id")
        if code_id is None:
            raise self.TransactionFailed(f"No code_id emitted by upload tx {response.hash}")
        return StoreReceipt(
            code_id=int(code_id),
            tx_hash=response.hash,
            height=response.height,
            gas_used=response.gas_used,
        )

    def instantiate(
        self,
        sender: Wallet,
        code_id: int,
        message: Dict,
        label: str,
        gas_limit: int,
        memo: Optional[str] = None,
        admin: Optional[str] = None,
    ) -> InstantiateReceipt:
        admin_address = Address(admin) if admin else None
        instantiate_message = create_cosmwasm_instantiate_msg(
            code_id,
            message,
            label,
            sender.address(),
            admin_address=admin_address,
        )
        response = self._broadcast(sender, instantiate_message, gas_limit=gas_limit, memo=memo)

        # the contract itself comes first, then the contracts of its submessages
        events = self._events(response)
        address = find_event_attribute(events, "instantiate", "_contract_address")
        if address is None:
            raise self.TransactionFailed(
                f"No contract address emitted by instantiate tx {response.hash}"
            )
        return InstantiateReceipt(
            address=address,
            tx_hash=response.hash,
            height=response.height,
            gas_used=response.gas_used,
        )

    def execute(
        self,
        sender: Wallet,
        contract_address: str,
        message: Dict,
        gas_limit: int,
        memo: Optional[str] = None,
    ) -> ExecuteReceipt:
        execute_message = create_cosmwasm_execute_msg(
            sender.address(), Address(contract_address), message
        )
        response = self._broadcast(sender, execute_message, gas_limit=gas_limit, memo=memo)
        return ExecuteReceipt(
            tx_hash=response.hash,
            height=response.height,
            gas_used=response.gas_used,
            events=self._events(response),
        )
