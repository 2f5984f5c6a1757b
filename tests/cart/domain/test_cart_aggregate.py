"""Tests for the ShoppingCart aggregate."""

import pytest
from factories import make_product
from protean.exceptions import ValidationError

from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from storefront.errors import InsufficientStock, NotFound, ProductUnavailable


def _make_cart():
    return ShoppingCart.create(user_id="user-001")


def _assert_totals(cart):
    assert cart.total_amount == sum(i.price * i.quantity for i in cart.items)
    assert cart.total_items == sum(i.quantity for i in cart.items)


class TestAddItem:
    def test_add_item_snapshots_price(self):
        cart = _make_cart()
        product = make_product(price=100, quantity=3, save=False)
        cart.add_item(product, 2)

        assert len(cart.items) == 1
        assert cart.items[0].price == 100
        assert cart.total_amount == 200
        _assert_totals(cart)

    def test_add_item_raises_event(self):
        cart = _make_cart()
        product = make_product(save=False)
        cart.add_item(product, 1)
        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 1
        assert events[0].product_id == str(product.id)

    def test_variant_deltas_are_added_to_unit_price(self):
        cart = _make_cart()
        product = make_product(price=100, quantity=5, variants=[("size", "XL", 30)], save=False)
        cart.add_item(product, 2, [{"kind": "size", "value": "XL"}])
        assert cart.items[0].price == 130
        assert cart.total_amount == 260

    def test_same_product_and_variants_merge(self):
        cart = _make_cart()
        product = make_product(quantity=5, variants=[("size", "M", 0)], save=False)
        cart.add_item(product, 1, [{"kind": "size", "value": "M"}])
        cart.add_item(product, 2, [{"kind": "size", "value": "M"}])
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        _assert_totals(cart)

    def test_different_variants_make_separate_lines(self):
        cart = _make_cart()
        product = make_product(quantity=5, variants=[("size", "M", 0), ("size", "L", 10)], save=False)
        cart.add_item(product, 1, [{"kind": "size", "value": "M"}])
        cart.add_item(product, 1, [{"kind": "size", "value": "L"}])
        assert len(cart.items) == 2
        assert cart.total_amount == 100 + 110

    def test_merged_quantity_rechecked_against_stock(self):
        cart = _make_cart()
        product = make_product(quantity=3, save=False)
        cart.add_item(product, 2)
        with pytest.raises(InsufficientStock):
            cart.add_item(product, 2)
        assert cart.items[0].quantity == 2
        _assert_totals(cart)

    def test_merged_quantity_capped_at_ten(self):
        cart = _make_cart()
        product = make_product(quantity=50, save=False)
        cart.add_item(product, 8)
        with pytest.raises(ValidationError):
            cart.add_item(product, 3)
        assert cart.items[0].quantity == 8

    def test_over_stock_rejected(self):
        cart = _make_cart()
        product = make_product(quantity=1, save=False)
        with pytest.raises(InsufficientStock):
            cart.add_item(product, 2)
        assert cart.items == []

    def test_inactive_product_rejected(self):
        cart = _make_cart()
        product = make_product(is_active=False, save=False)
        with pytest.raises(ProductUnavailable):
            cart.add_item(product, 1)

    @pytest.mark.parametrize("quantity", [0, -1, 11])
    def test_quantity_out_of_range(self, quantity):
        cart = _make_cart()
        product = make_product(quantity=50, save=False)
        with pytest.raises(ValidationError):
            cart.add_item(product, quantity)

    def test_price_change_after_add_keeps_snapshot(self):
        cart = _make_cart()
        product = make_product(price=100, quantity=5, save=False)
        cart.add_item(product, 1)
        product.change_price(150)

        assert cart.items[0].price == 100
        cart.add_item(make_product(name="Cap", price=150, save=False), 1)
        assert cart.total_amount == 250


class TestUpdateQuantity:
    def test_update_quantity(self):
        cart = _make_cart()
        product = make_product(quantity=5, save=False)
        item = cart.add_item(product, 1)
        cart._events.clear()

        cart.update_item_quantity(item.id, 4, product)

        assert cart.items[0].quantity == 4
        _assert_totals(cart)
        event = cart._events[0]
        assert isinstance(event, CartItemQuantityUpdated)
        assert (event.previous_quantity, event.new_quantity) == (1, 4)

    def test_update_over_stock_leaves_cart_unchanged(self):
        cart = _make_cart()
        product = make_product(price=100, quantity=3, save=False)
        item = cart.add_item(product, 2)

        with pytest.raises(InsufficientStock):
            cart.update_item_quantity(item.id, 4, product)

        assert cart.items[0].quantity == 2
        assert cart.total_amount == 200

    def test_zero_is_not_a_removal(self):
        cart = _make_cart()
        product = make_product(save=False)
        item = cart.add_item(product, 1)
        with pytest.raises(ValidationError):
            cart.update_item_quantity(item.id, 0, product)
        assert len(cart.items) == 1

    def test_unknown_item(self):
        cart = _make_cart()
        with pytest.raises(NotFound):
            cart.update_item_quantity("missing", 2, make_product(save=False))

    def test_keeps_price_snapshot(self):
        cart = _make_cart()
        product = make_product(price=100, quantity=5, save=False)
        item = cart.add_item(product, 1)
        product.change_price(300)
        cart.update_item_quantity(item.id, 2, product)
        assert cart.total_amount == 200


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _make_cart()
        item = cart.add_item(make_product(save=False), 1)
        assert cart.remove_item(item.id) is True
        assert cart.items == []
        assert cart.total_amount == 0
        assert any(isinstance(e, CartItemRemoved) for e in cart._events)

    def test_remove_twice_is_a_no_op(self):
        cart = _make_cart()
        keep = cart.add_item(make_product(name="Pen", save=False), 1)
        gone = cart.add_item(make_product(name="Cap", save=False), 1)

        cart.remove_item(gone.id)
        total_after_first = cart.total_amount
        assert cart.remove_item(gone.id) is False

        assert [str(i.id) for i in cart.items] == [str(keep.id)]
        assert cart.total_amount == total_after_first

    def test_clear(self):
        cart = _make_cart()
        cart.add_item(make_product(name="Pen", save=False), 1)
        cart.add_item(make_product(name="Cap", save=False), 2)
        cart.clear()
        assert cart.items == []
        assert (cart.total_amount, cart.total_items) == (0, 0)
        event = [e for e in cart._events if isinstance(e, CartCleared)][0]
        assert event.items_removed == 2


class TestProblems:
    def test_collects_every_failing_line(self):
        cart = _make_cart()
        gone = make_product(name="Pen", save=False)
        retired = make_product(name="Cap", save=False)
        scarce = make_product(name="Mug", quantity=5, save=False)
        for product in (gone, retired, scarce):
            cart.add_item(product, 2)

        retired.deactivate()
        scarce.quantity = 1

        problems = cart.problems({str(retired.id): retired, str(scarce.id): scarce})
        assert problems == [
            f"Product {gone.id} no longer exists",
            "Cap is no longer available",
            "Only 1 units of Mug available",
        ]

    def test_no_problems(self):
        cart = _make_cart()
        product = make_product(save=False)
        cart.add_item(product, 1)
        assert cart.problems({str(product.id): product}) == []


class TestTotalsInvariant:
    def test_stale_total_rejected(self):
        cart = _make_cart()
        cart.add_item(make_product(price=100, save=False), 1)
        with pytest.raises(ValidationError):
            cart.total_amount = 999
