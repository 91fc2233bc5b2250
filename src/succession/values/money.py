"""Monetary amounts as exact decimals with an ISO currency code."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CENT = Decimal("0.01")


class Money(BaseModel):
    """
    Immutable amount of money.

    Arithmetic and comparisons are only defined between amounts of the same
    currency; mixing currencies raises ValueError.

    Example:
        >>> Money.of(1500) + Money.of("250.50")
        Money(amount=Decimal('1750.50'), currency='KES')
    """

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(default=Decimal("0"))
    currency: str = Field(default="KES", min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def _normalize_currency(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def of(cls, amount: Decimal | int | str, currency: str = "KES") -> Money:
        return cls(amount=Decimal(str(amount)), currency=currency)

    @classmethod
    def zero(cls, currency: str = "KES") -> Money:
        return cls(amount=Decimal("0"), currency=currency)

    @classmethod
    def total(cls, amounts: Iterable[Money], currency: str = "KES") -> Money:
        """Sum an iterable of Money, starting from zero in ``currency``."""
        result = cls.zero(currency)
        for amount in amounts:
            result = result + amount
        return result

    def _check_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Currency mismatch: {self.currency} vs {other.currency}")

    def __add__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(amount=self.amount + other.amount, currency=self.currency)

    def __sub__(self, other: Money) -> Money:
        self._check_currency(other)
        return Money(amount=self.amount - other.amount, currency=self.currency)

    def __lt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def multiply(self, factor: Decimal) -> Money:
        """Scale the amount, rounding half-up to cents."""
        scaled = (self.amount * factor).quantize(CENT, rounding=ROUND_HALF_UP)
        return Money(amount=scaled, currency=self.currency)

    def min(self, other: Money) -> Money:
        return self if self <= other else other

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:,.2f}"


__all__ = ["Money", "CENT"]
