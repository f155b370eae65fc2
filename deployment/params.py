import json
import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Optional

from deployment.chain import ExecuteReceipt
from deployment.confirm import _confirm_edit, _confirm_resolution, _confirm_upload, _continue
from deployment.constants import (
    HD_PATH,
    INSTANTIATE_GAS_LIMIT,
    TOLERATED_CLIENT_ERROR,
    UPLOAD_GAS_LIMIT,
)
from deployment.networks import Connection
from deployment.report import DeploymentReport, validate_report_filepath, write_report
from deployment.types import calculate_fee
from deployment.utils import get_wasm_filepath, read_json_config, write_json_config

DEPLOYER = "$deployer"


class VariableContext:
    def __init__(
        self,
        deployer_address: str,
        constants: typing.Dict[str, Any] = None,
        code_ids: typing.Dict[str, int] = None,
        addresses: typing.Dict[str, str] = None,
    ):
        self.deployer_address = deployer_address
        self.constants = constants or dict()
        self.code_ids = code_ids or dict()
        self.addresses = addresses or dict()


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    def __init__(self, context: VariableContext):
        self.address = context.deployer_address

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self) -> Any:
        return self.address


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise ValueError(f"Constant '{constant_name}' not found in chain config.")

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self) -> Any:
        return self.constant_value


class CodeId(Variable):
    CODE_ID_PREFIX = "code_id:"

    def __init__(self, variable: str, context: VariableContext):
        contract_name = variable[len(self.CODE_ID_PREFIX) :]
        try:
            self.code_id = context.code_ids[contract_name]
        except KeyError:
            raise ValueError(f"Code ID for '{contract_name}' not found; upload it first.")

    @classmethod
    def is_code_id(cls, value: str) -> bool:
        """Returns True if the variable refers to the code ID of an uploaded binary."""
        return value.startswith(cls.CODE_ID_PREFIX)

    def resolve(self) -> Any:
        return self.code_id


class ContractAddress(Variable):
    def __init__(self, contract_name: str, context: VariableContext):
        if contract_name not in context.addresses:
            raise ValueError(f"Contract name {contract_name} not found")
        self.address = context.addresses[contract_name]

    def resolve(self) -> Any:
        """Resolves a contract address."""
        return self.address


def _resolve_param(value: Any) -> Any:
    """Resolves a single parameter value, recursing into lists and objects."""
    if isinstance(value, list):
        return [_resolve_param(v) for v in value]

    if isinstance(value, dict):
        return OrderedDict((k, _resolve_param(v)) for k, v in value.items())

    if isinstance(value, Variable):
        return value.resolve()

    return value  # literally a value


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount(context)
    elif CodeId.is_code_id(variable):
        return CodeId(variable, context)
    elif Constant.is_constant(variable):
        return Constant(variable, context)
    else:
        return ContractAddress(variable, context)


def _process_raw_value(value: Any, variable_context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, variable_context) for v in value]

    if isinstance(value, dict):
        return OrderedDict((k, _process_raw_value(v, variable_context)) for k, v in value.items())

    if Variable.is_variable(value):
        value = _variable_from_value(value, variable_context)

    return value


def resolve_message(message: Any, context: VariableContext) -> Any:
    """Returns a copy of the message with every variable replaced by its value."""
    processed = _process_raw_value(message, context)
    return _resolve_param(processed)


class Transactor:
    """
    Represents a wallet plus annotated execution of contract messages.
    """

    def __init__(
        self,
        connection: Connection,
        autoconfirm: bool = False,
        constants: Optional[Dict[str, Any]] = None,
    ):
        self.connection = connection
        self.client = connection.client
        self._constants = constants or dict()
        if autoconfirm:
            print("WARNING: Autoconfirm is enabled. Transactions will be sent without confirmation.")
        self._autoconfirm = autoconfirm

    def get_address(self) -> str:
        """Returns the transactor address."""
        return self.connection.address

    def _variable_context(self) -> VariableContext:
        return VariableContext(deployer_address=self.get_address(), constants=self._constants)

    def resolve(self, message: Any) -> Any:
        return resolve_message(message, self._variable_context())

    def execute(
        self,
        contract_address: str,
        message: Dict,
        gas_limit: int,
        tolerate_client_quirk: bool = False,
    ) -> Optional[ExecuteReceipt]:
        contract_address = self.resolve(contract_address)
        resolved_message = self.resolve(message)

        fee = calculate_fee(gas_limit, self.client.gas_price)
        pretty_message = json.dumps(resolved_message, indent=4).replace("\n", "\n\t")
        print(
            f"\nExecuting on {contract_address} (max fee {fee}) with message:\n\t{pretty_message}"
        )
        if not self._autoconfirm:
            _continue()

        try:
            return self.client.execute(
                self.connection.wallet,
                contract_address,
                resolved_message,
                gas_limit=gas_limit,
            )
        except Exception as e:
            if tolerate_client_quirk and TOLERATED_CLIENT_ERROR in str(e):
                print(f"(i) Ignoring known client error: {e}")
                return None
            raise


class Deployer(Transactor):
    """
    Represents a wallet plus the code IDs and addresses of a deployment
    in progress, plus validated/annotated upload and instantiation.
    """

    def __init__(
        self,
        connection: Connection,
        chain_config: typing.Dict,
        wasm_dir: Path,
        report_filepath: Path,
        autoconfirm: bool = False,
    ):
        constants = chain_config.get("constants") or dict()
        super().__init__(connection, autoconfirm, constants=constants)

        self.chain_config = chain_config
        self.wasm_dir = Path(wasm_dir)
        self.report_filepath = validate_report_filepath(
            report_filepath, chain_id=connection.chain_id
        )

        self.code_ids: typing.Dict[str, int] = OrderedDict()
        self.addresses: typing.Dict[str, str] = OrderedDict()

        self._print_deployment_info()

        if not self._autoconfirm:
            # Confirms the start of the deployment.
            _continue()

    def _variable_context(self) -> VariableContext:
        return VariableContext(
            deployer_address=self.get_address(),
            constants=self._constants,
            code_ids=self.code_ids,
            addresses=self.addresses,
        )

    def store(self, contract_name: str) -> int:
        """Uploads the wasm binary of a contract and returns its code ID."""
        wasm_filepath = get_wasm_filepath(self.wasm_dir, contract_name)
        fee = calculate_fee(UPLOAD_GAS_LIMIT, self.client.gas_price)
        print(f"Storing {contract_name} from {wasm_filepath.name} (max fee {fee})...")
        if not self._autoconfirm:
            _confirm_upload(contract_name)

        receipt = self.client.upload(
            self.connection.wallet,
            wasm_filepath,
            gas_limit=UPLOAD_GAS_LIMIT,
            memo=f"Upload {contract_name} contract",
        )
        print(
            f"{contract_name} uploaded successfully. Receipt:\n"
            f"{json.dumps(receipt._asdict())}\n"
        )
        self.code_ids[contract_name] = receipt.code_id
        return receipt.code_id

    def instantiate(
        self,
        config: typing.Dict,
        code_id: int,
        name: Optional[str] = None,
        gas_limit: int = INSTANTIATE_GAS_LIMIT,
        admin: Optional[str] = DEPLOYER,
    ) -> str:
        """
        Instantiates a contract from a {label, instantiate} config.
        The address is recorded under the label and, if given, the short name
        so that later messages can refer to it as a variable.
        """
        label = config["label"]
        message = self.resolve(config.get("instantiate") or dict())
        admin = self.resolve(admin) if admin else None

        print(f"Instantiating {label}...")
        if not self._autoconfirm:
            _confirm_resolution(message, label)

        receipt = self.client.instantiate(
            self.connection.wallet,
            code_id,
            message,
            label,
            gas_limit=gas_limit,
            memo=f"Instantiation {label}",
            admin=admin,
        )
        print(f"{label} contract instantiated at {receipt.address}\n")

        self.addresses[label] = receipt.address
        if name:
            self.addresses[name] = receipt.address
        return receipt.address

    def checkpoint(self, filepath: Path, config: typing.Dict) -> typing.Dict:
        """
        Saves an updated config and lets the operator edit it before it is used.
        Returns the config as it is on disk afterwards.
        """
        write_json_config(filepath, config)
        if self._autoconfirm:
            return config
        _confirm_edit(filepath)
        return read_json_config(filepath)

    def finalize(self, report: DeploymentReport) -> Path:
        """Publishes the deployment report."""
        return write_report(report, self.report_filepath)

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_address()}",
            f"HD Path: {HD_PATH}",
            f"Wasm: {self.wasm_dir}",
            f"Report: {self.report_filepath}",
            f"Chain ID: {self.connection.chain_id}",
            f"Gas Price: {self.client.gas_price}",
            sep="\n",
        )
