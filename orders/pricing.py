"""Order size and price derivation.

Pure functions over plain values; they never touch the database.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from .exceptions import PricingError

ZERO = Decimal('0')


def to_decimal(value, default=ZERO) -> Decimal:
    """Coerce ``value`` to Decimal; missing or non-numeric input gives ``default``."""
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return default
    return result if result.is_finite() else default


def calculate_order_size(repeats, sheet_height) -> Decimal:
    """``repeats * sheet_height``. Sheet width is not part of the size."""
    return to_decimal(repeats) * to_decimal(sheet_height)


@dataclass(frozen=True)
class PricingResult:
    type: str
    total_price: Decimal
    source: str  # 'product', 'material' or 'manual'


def resolve_pricing(*, material=None, product=None, order_size=ZERO, total_price=None, manual_type=None) -> PricingResult:
    """Pick ``(type, total_price)`` from exactly one pricing source.

    Priority: product (flat selling price), then material (selling price
    times order size, or flat when the size is zero), then the
    caller-supplied ``total_price``. Raises :class:`PricingError` when no
    source yields a price.
    """
    if product is not None:
        return PricingResult(type=product.name, total_price=to_decimal(product.selling_price), source='product')

    order_size = to_decimal(order_size)
    supplied = None if total_price is None or total_price == '' else to_decimal(total_price)

    if material is not None:
        if material.has_selling_price:
            price = material.selling_price * order_size if order_size > ZERO else material.selling_price
            return PricingResult(type=material.name, total_price=price, source='material')
        if supplied is None:
            raise PricingError(
                f'Material "{material.name}" has no selling price; total_price is required.'
            )
        return PricingResult(type=material.name, total_price=supplied, source='manual')

    if supplied is None:
        raise PricingError('Select a material or product, or provide total_price.')
    return PricingResult(type=(manual_type or '').strip(), total_price=supplied, source='manual')
