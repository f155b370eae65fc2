from collections.abc import Mapping
from typing import Any, Iterable, List, NamedTuple, Optional, Tuple

WASM_EVENT_TYPE = "wasm"


class TxEvent(NamedTuple):
    """A single event emitted by a transaction."""

    type: str
    attributes: List[Tuple[str, str]]


def _text(value: Any) -> str:
    # older node protos carry attributes as bytes
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def _to_event(raw: Any) -> TxEvent:
    if isinstance(raw, TxEvent):
        return raw
    if isinstance(raw, Mapping):
        attributes = [(_text(a["key"]), _text(a["value"])) for a in raw.get("attributes", [])]
        return TxEvent(type=raw["type"], attributes=attributes)
    # proto-like objects
    attributes = [(_text(a.key), _text(a.value)) for a in raw.attributes]
    return TxEvent(type=raw.type, attributes=attributes)


def normalize_events(raw_events: Optional[Iterable[Any]]) -> List[TxEvent]:
    """
    Normalizes the events of a transaction, given as a sequence of events
    with 'type' and 'attributes' (dicts, protos or TxEvents), keeping their order.
    """
    if not raw_events:
        return list()
    return [_to_event(raw) for raw in raw_events]


def wasm_events(events: Iterable[TxEvent]) -> List[TxEvent]:
    return [e for e in events if e.type.strip() == WASM_EVENT_TYPE]


def find_attribute(event: TxEvent, key: str) -> Optional[str]:
    """Returns the value of the first attribute with the given key."""
    for attribute_key, value in event.attributes:
        if attribute_key == key:
            return value
    return None


def find_event_attribute(events: Iterable[TxEvent], event_type: str, key: str) -> Optional[str]:
    for event in events:
        if event.type.strip() != event_type:
            continue
        value = find_attribute(event, key)
        if value is not None:
            return value
    return None


def parse_created_pairs(events: Iterable[TxEvent]) -> List[dict]:
    """Returns the pairs announced by the factory in the wasm events of a transaction."""
    pairs = list()
    for event in wasm_events(events):
        pair_name = find_attribute(event, "pair")
        pair_address = find_attribute(event, "pair_contract_addr")
        if pair_name and pair_address:
            pairs.append({"pairName": pair_name, "pairAddress": pair_address})
    return pairs
