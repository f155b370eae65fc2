import json
from pathlib import Path
from typing import Any


def _abort() -> None:
    print("Aborting deployment!")
    exit(-1)


def _confirm_upload(contract_name: str) -> None:
    """Asks the user to confirm the upload of a single wasm binary."""
    answer = input(f"Upload {contract_name} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_empty_value() -> None:
    answer = input("Empty value detected in message; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _contains_empty_value(value: Any) -> bool:
    if isinstance(value, dict):
        return any(_contains_empty_value(v) for v in value.values())
    if isinstance(value, list):
        return any(_contains_empty_value(v) for v in value)
    return value == ""


def _confirm_resolution(resolved_message: dict, label: str) -> None:
    """Asks the user to confirm the resolved instantiate message for a single contract."""
    print(f"\nInstantiate message for {label}")
    print(json.dumps(resolved_message, indent=4))
    answer = input(f"Instantiate {label} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()
    if _contains_empty_value(resolved_message):
        _confirm_empty_value()


def _confirm_edit(filepath: Path) -> None:
    """Gives the user the chance to hand-edit a config file before it is used."""
    print(f"\n(i) {filepath} has been updated; review or edit it now.")
    _continue()
