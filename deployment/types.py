import math
import re
from decimal import Decimal, InvalidOperation
from typing import NamedTuple

import click

# <amount><denom>, denom rules as enforced by the cosmos sdk
GAS_PRICE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)([a-zA-Z][a-zA-Z0-9/:._-]{2,127})$")


class GasPrice(NamedTuple):
    amount: Decimal
    denom: str

    @classmethod
    def from_string(cls, value: str) -> "GasPrice":
        """Parses a gas price such as '0.01ugrain'."""
        match = GAS_PRICE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"Invalid gas price string '{value}'")
        amount, denom = match.groups()
        try:
            return cls(amount=Decimal(amount), denom=denom)
        except InvalidOperation:
            raise ValueError(f"Invalid gas price amount '{amount}'")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


class Fee(NamedTuple):
    amount: int
    denom: str
    gas_limit: int

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


def calculate_fee(gas_limit: int, gas_price: GasPrice) -> Fee:
    """Fee paid for a transaction with the given gas limit, rounded up."""
    amount = math.ceil(Decimal(gas_limit) * gas_price.amount)
    return Fee(amount=amount, denom=gas_price.denom, gas_limit=gas_limit)


class GasPriceType(click.ParamType):
    name = "gas_price"

    def convert(self, value, param, ctx):
        if isinstance(value, GasPrice):
            return value
        try:
            return GasPrice.from_string(value)
        except ValueError:
            self.fail(f"{value} is not a valid gas price (e.g. 0.01ugrain)", param, ctx)
