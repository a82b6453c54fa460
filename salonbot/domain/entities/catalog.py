from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Combo:
    members: frozenset[str]  # lower-cased service names
    price: Decimal
    display_name: str


@dataclass(frozen=True)
class SalonCatalog:
    prices: Mapping[str, Decimal]
    combos: tuple[Combo, ...]
    branches: tuple[str, ...]
    currency_symbol: str = "₹"

    @staticmethod
    def build(
        prices: Mapping[str, Decimal | float | int | str],
        combos: list[tuple[list[str], Decimal | float | int | str]],
        branches: list[str],
        currency_symbol: str = "₹",
    ) -> "SalonCatalog":
        normalized_prices = {
            name.strip().lower(): Decimal(str(price)) for name, price in prices.items()
        }
        normalized_combos = tuple(
            Combo(
                members=frozenset(m.strip().lower() for m in members),
                price=Decimal(str(price)),
                display_name="combo: " + " + ".join(m.strip().lower() for m in members),
            )
            for members, price in combos
        )
        return SalonCatalog(
            prices=MappingProxyType(normalized_prices),
            combos=normalized_combos,
            branches=tuple(b.strip() for b in branches if b and b.strip()),
            currency_symbol=currency_symbol,
        )

    @property
    def service_names(self) -> tuple[str, ...]:
        return tuple(self.prices.keys())

    def resolve_service(self, text: str) -> str | None:
        """Resolve a service by name or by its 1-based position in the menu."""
        normalized = " ".join(text.lower().split())
        if normalized in self.prices:
            return normalized
        if normalized.isdecimal():
            index = int(normalized)
            if 1 <= index <= len(self.service_names):
                return self.service_names[index - 1]
        return None

    def resolve_branch(self, text: str) -> str | None:
        normalized = " ".join(text.lower().split())
        if normalized.isdecimal():
            index = int(normalized)
            if 1 <= index <= len(self.branches):
                return self.branches[index - 1]
            return None
        for branch in self.branches:
            if branch.lower() == normalized:
                return branch
        return None
