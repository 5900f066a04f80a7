# shirur_express/services/pricing.py
"""Server-side money arithmetic. Client-submitted totals are only ever compared, never stored."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from ..errors import ValidationError

CENT = Decimal("0.01")


def money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def invoice_total(spare_part_prices: Iterable[Decimal], service_charge: Decimal) -> Decimal:
    return money(sum((money(p) for p in spare_part_prices), Decimal("0")) + money(service_charge))


def order_totals(subtotal: Decimal, platform_fee_rate: Decimal, delivery_fee: Decimal) -> Dict[str, Decimal]:
    subtotal = money(subtotal)
    platform_fee = money(subtotal * Decimal(str(platform_fee_rate)))
    delivery_fee = money(delivery_fee)
    return {
        "subtotal": subtotal,
        "platform_fee": platform_fee,
        "delivery_fee": delivery_fee,
        "total": subtotal + platform_fee + delivery_fee,
    }


def to_minor_units(amount: Decimal) -> int:
    """Rupees to paise"""
    return int((money(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def check_client_total(client_total: Optional[Decimal], server_total: Decimal, what: str) -> None:
    if client_total is None:
        return
    if abs(money(client_total) - server_total) > CENT:
        raise ValidationError(f"{what} total mismatch: expected {server_total}")
