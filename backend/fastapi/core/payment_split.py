"""
Revenue split between the company and the washer.

Every service-item line is split by a fixed, keyword-based policy:

- special items (engine, radiator, condenser): washer gets one third
- rugs: 50/50
- everything else: company 60%, washer 40%

Shares are exact ``Decimal`` values; rounding to cents happens only when
results are presented (see ``round_money``).
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Union

SPECIAL_KEYWORDS = ("engine", "radiator", "condenser")
RUG_KEYWORD = "rug"

REGULAR_COMPANY_RATE = Decimal("0.6")
REGULAR_WASHER_RATE = Decimal("0.4")
RUG_RATE = Decimal("0.5")

CENT = Decimal("0.01")


class ItemCategory(str, Enum):
    SPECIAL = "special"
    RUG = "rug"
    REGULAR = "regular"


@dataclass(frozen=True)
class PaymentSplit:
    company_share: Decimal
    washer_share: Decimal


def is_special_item(service_item_name: str) -> bool:
    """Check whether an item is always credited to the designated washer."""
    lowered = service_item_name.lower()
    return any(keyword in lowered for keyword in SPECIAL_KEYWORDS)


def classify_service_item(service_item_name: str) -> ItemCategory:
    if is_special_item(service_item_name):
        return ItemCategory.SPECIAL
    if RUG_KEYWORD in service_item_name.lower():
        return ItemCategory.RUG
    return ItemCategory.REGULAR


def split_payment(service_item_name: str, price: Union[Decimal, int, str]) -> PaymentSplit:
    """
    Split a line's price between the company and the washer.

    Args:
        service_item_name: Name of the service item (matched case-insensitively)
        price: Effective price of the line

    Returns:
        PaymentSplit with unrounded company and washer shares

    Example:
        >>> split_payment("Engine Wash", Decimal("300"))
        PaymentSplit(company_share=Decimal('200'), washer_share=Decimal('100'))
    """
    price = Decimal(price)
    category = classify_service_item(service_item_name)

    if category is ItemCategory.SPECIAL:
        washer_share = price / 3
        return PaymentSplit(company_share=price - washer_share, washer_share=washer_share)

    if category is ItemCategory.RUG:
        washer_share = price * RUG_RATE
        return PaymentSplit(company_share=price - washer_share, washer_share=washer_share)

    return PaymentSplit(
        company_share=price * REGULAR_COMPANY_RATE,
        washer_share=price * REGULAR_WASHER_RATE,
    )


def round_money(value: Union[Decimal, int]) -> Decimal:
    """Round to cents, halves away from zero."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
