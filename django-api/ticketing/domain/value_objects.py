"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Self
from uuid import UUID, uuid4


@dataclass(frozen=True)
class Identifier:
    """UUID-backed identifier. Subclasses never compare equal to each other."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


class EventId(Identifier):
    """Unique identifier for an Event."""


class TicketTypeId(Identifier):
    """Unique identifier for a TicketType."""


class TicketId(Identifier):
    """Unique identifier for a Ticket."""


class OrderId(Identifier):
    """Unique identifier for an Order."""


class RefundId(Identifier):
    """Unique identifier for a RefundRequest."""


class ActivityId(Identifier):
    """Unique identifier for an ActivityEntry."""


@dataclass(frozen=True)
class Money:
    """Price representation with validation."""

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def zero(cls) -> Self:
        return cls(amount=Decimal("0"))

    def __add__(self, other: "Money") -> "Money":
        return Money(amount=self.amount + other.amount)

    def __mul__(self, quantity: int) -> "Money":
        return Money(amount=self.amount * quantity)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class QRCode:
    """Opaque scannable code. Looked up by exact string match."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("QR code cannot be empty")

    def __str__(self) -> str:
        return self.value
