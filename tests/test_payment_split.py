from decimal import Decimal

import pytest

from backend.fastapi.core.payment_split import (
    ItemCategory, classify_service_item, is_special_item, round_money, split_payment
)


@pytest.mark.parametrize("name,price,company,washer", [
    ("Engine Wash", "300", "200.00", "100.00"),
    ("Car Rug", "100", "50.00", "50.00"),
    ("Full Wash", "50", "30.00", "20.00"),
])
def test_documented_splits(name, price, company, washer):
    split = split_payment(name, Decimal(price))

    assert round_money(split.company_share) == Decimal(company)
    assert round_money(split.washer_share) == Decimal(washer)


@pytest.mark.parametrize("name", ["ENGINE degrease", "radiator flush", "AC Condenser", "Rug + Engine"])
def test_special_keywords_match_case_insensitively(name):
    assert is_special_item(name)
    assert classify_service_item(name) is ItemCategory.SPECIAL


def test_special_takes_precedence_over_rug():
    split = split_payment("Engine Rug Combo", Decimal("90"))

    assert split.washer_share == Decimal("30")
    assert split.company_share == Decimal("60")


def test_classification():
    assert classify_service_item("Car Rug") is ItemCategory.RUG
    assert classify_service_item("Full Wash") is ItemCategory.REGULAR
    assert not is_special_item("Full Wash")


@pytest.mark.parametrize("price", ["0", "0.01", "33.33", "50", "999999.99"])
def test_regular_and_rug_shares_sum_to_price(price):
    price = Decimal(price)
    for name in ("Full Wash", "Car Rug"):
        split = split_payment(name, price)
        assert split.company_share + split.washer_share == price


def test_special_split_is_a_third_without_rounding():
    split = split_payment("Engine Wash", Decimal("100"))

    assert split.washer_share == Decimal("100") / 3
    assert split.company_share == Decimal("100") - split.washer_share
    assert round_money(split.washer_share) == Decimal("33.33")
    assert round_money(split.company_share) == Decimal("66.67")


def test_round_money_rounds_halves_up():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert round_money(Decimal("-0.005")) == Decimal("-0.01")
