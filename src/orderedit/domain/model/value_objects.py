"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from orderedit.domain.exceptions import ValidationError

TWO_PLACES = Decimal("0.01")
# Largest decimal exponent accepted from typed input (about a quadrillion).
MAX_EXPONENT = 15


def parse_amount(value: object) -> Decimal:
    """Parse a free-text amount typed into the edit surface.

    Never raises: anything unparseable, non-finite, negative or absurdly
    large becomes 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not amount.is_finite() or amount < 0 or amount.adjusted() > MAX_EXPONENT:
        return Decimal("0")
    return amount


def parse_quantity(value: object) -> int:
    """Parse a quantity field; truncates fractions, 0 on garbage."""
    amount = parse_amount(value)
    return int(amount)


def same_backend_id(left: object, right: object) -> bool:
    """Normalized identity equality for backend ids.

    Ids arrive as ``int`` from some endpoints and ``str`` from others, so
    both sides are compared as strings.  ``None`` never matches.
    """
    if left is None or right is None:
        return False
    return str(left) == str(right)


def normalize_backend_id(value: object) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def rounded(self) -> Money:
        return Money(self.amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Strict factory for programmatic input; raises on bad amounts."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
