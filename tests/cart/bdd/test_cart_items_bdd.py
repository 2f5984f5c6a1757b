"""BDD tests for cart item management."""

from factories import load_cart, load_product
from protean.utils.globals import current_domain
from pytest_bdd import parsers, scenarios, then, when

from storefront.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from storefront.catalogue.product import Product
from storefront.errors import StorefrontError

scenarios("features/cart_items.feature")


def _line_id(user_id, product):
    cart = load_cart(user_id)
    line = next((i for i in cart.items if str(i.product_id) == str(product.id)), None) if cart else None
    return str(line.id) if line else "removed-line"


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('{quantity:d} "{name}" is added to the cart'))
def add_to_cart(user_id, products, name, quantity):
    command = AddToCart(user_id=user_id, product_id=products[name].id, quantity=quantity)
    current_domain.process(command, asynchronous=False)


@when(parsers.cfparse('the "{name}" line is changed to {quantity:d}'))
def change_line(user_id, products, name, quantity, error):
    command = UpdateCartQuantity(user_id=user_id, item_id=_line_id(user_id, products[name]), quantity=quantity)
    try:
        current_domain.process(command, asynchronous=False)
    except StorefrontError as exc:
        error["exc"] = exc


@when(parsers.cfparse('the "{name}" line is removed'))
def remove_line(user_id, products, name):
    command = RemoveFromCart(user_id=user_id, item_id=_line_id(user_id, products[name]))
    current_domain.process(command, asynchronous=False)


@when(parsers.cfparse('the price of "{name}" changes to {price:d}'))
def change_price(products, name, price):
    product = load_product(products[name].id)
    product.change_price(price)
    current_domain.repository_for(Product).add(product)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} line"))
def cart_has_one_line(user_id, count):
    assert len(load_cart(user_id).items) == count


@then(parsers.cfparse("the cart has {count:d} lines"))
def cart_has_lines(user_id, count):
    assert len(load_cart(user_id).items) == count
