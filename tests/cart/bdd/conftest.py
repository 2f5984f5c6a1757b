"""Shared BDD fixtures and step definitions for the cart."""

import pytest
from factories import load_cart, make_product
from pytest_bdd import given, parsers, then

USER = "student-bdd"


@pytest.fixture()
def user_id():
    return USER


@pytest.fixture()
def products():
    """Products created by the scenario, by name."""
    return {}


@pytest.fixture()
def error():
    """Container for an error raised by a When step."""
    return {"exc": None}


@given(parsers.cfparse('a product "{name}" priced {price:d} with {quantity:d} units in stock'))
def product_in_stock(products, name, price, quantity):
    products[name] = make_product(name=name, price=price, quantity=quantity)


@given("an empty cart")
def empty_cart(user_id):
    assert load_cart(user_id) is None


@then(parsers.cfparse('the request fails with "{message}"'))
def request_fails(error, message):
    assert error["exc"] is not None
    assert str(error["exc"]) == message


@then(parsers.cfparse("the cart total is {amount:d} for {count:d} items"))
def cart_total(user_id, amount, count):
    cart = load_cart(user_id)
    total_amount = cart.total_amount if cart else 0
    total_items = cart.total_items if cart else 0
    assert (total_amount, total_items) == (amount, count)
