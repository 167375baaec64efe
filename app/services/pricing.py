# services/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

CENT = Decimal("0.01")
DEFAULT_VAT_RATE = Decimal("0.15")


class Quote(NamedTuple):
    quantity: Decimal
    hours_value: Decimal
    total: Decimal


def round_currency(value) -> Decimal:
    """Redondea a dos decimales, mitad alejándose de cero."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def billable_quantity(slots: Iterable) -> Decimal:
    """Suma de horas diarias de los horarios (no es un conteo de horarios)."""
    return sum((Decimal(str(slot.daily_hours)) for slot in slots), Decimal("0.00"))


def price(unit_price, slots, materials_value=None, with_vat: bool = False,
          vat_rate=DEFAULT_VAT_RATE) -> Quote:
    quantity = billable_quantity(slots)
    hours_value = round_currency(Decimal(str(unit_price)) * quantity)

    subtotal = hours_value
    if materials_value is not None:
        subtotal = round_currency(subtotal + Decimal(str(materials_value)))

    total = subtotal
    if with_vat:
        total += subtotal * Decimal(str(vat_rate))

    return Quote(quantity=quantity, hours_value=hours_value, total=round_currency(total))
