"""Shared BDD fixtures for checkout."""

import pytest
from factories import make_product
from pytest_bdd import given, parsers


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def outcomes():
    """Receipt or error of the last checkout, by user."""
    return {}


@given(parsers.cfparse('a product "{name}" priced {price:d} with {quantity:d} units in stock'))
def product_in_stock(products, name, price, quantity):
    products[name] = make_product(name=name, price=price, quantity=quantity)
