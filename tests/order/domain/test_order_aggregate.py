"""Tests for the Order aggregate and order numbering."""

import pydantic
import pytest
from factories import ADDRESS
from protean.exceptions import ValidationError

from storefront.config import Settings
from storefront.errors import OrderNumberExhausted
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.numbering import MAX_PREFIX_LENGTH, allocate_order_number, generate_order_number
from storefront.order.order import Order, OrderStatus, PaymentStatus


def _line(product_id="prod-1", name="Hoodie", price=100, quantity=2, variants=None):
    return {
        "product_id": product_id,
        "product_name": name,
        "product_image": None,
        "price": price,
        "quantity": quantity,
        "selected_variants": variants or [],
    }


def _place(lines=None, **overrides):
    kwargs = {
        "order_number": "DTU123456ABCDEF",
        "user_id": "user-001",
        "lines": [_line()] if lines is None else lines,
        "shipping_address": ADDRESS,
        "payment_method": "cash_on_delivery",
    }
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestOrderPlacement:
    def test_place_computes_totals(self):
        order = _place(lines=[_line(price=100, quantity=2), _line("prod-2", "Cap", 50, 1)], tax=18, shipping=40)
        assert order.subtotal == 250
        assert order.total_amount == 250 + 18 + 40
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.currency == "INR"

    def test_place_raises_order_placed(self):
        order = _place()
        events = [e for e in order._events if isinstance(e, OrderPlaced)]
        assert len(events) == 1
        assert events[0].order_number == "DTU123456ABCDEF"
        assert events[0].total_amount == 200

    def test_lines_keep_variant_snapshot(self):
        order = _place(lines=[_line(price=130, variants=[{"kind": "size", "value": "XL", "price": 30}])])
        assert order.items[0].variants == [{"kind": "size", "price": 30, "value": "XL"}]

    def test_shipping_address_country_defaults(self):
        assert _place().shipping_address.country == "India"

    def test_empty_order_rejected(self):
        with pytest.raises(ValidationError):
            _place(lines=[])

    def test_unknown_payment_method_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _place(payment_method="barter")
        assert "payment_method" in exc.value.messages

    @pytest.mark.parametrize("field,value", [("phone", "12345"), ("zip_code", "1100")])
    def test_invalid_address_rejected(self, field, value):
        with pytest.raises(ValidationError):
            _place(shipping_address={**ADDRESS, field: value})

    def test_total_must_equal_components(self):
        order = _place()
        with pytest.raises(ValidationError):
            order.total_amount = order.total_amount + 1


class TestStatusUpdate:
    def test_any_enumerated_status_is_accepted(self):
        order = _place()
        order.update_status("delivered")
        assert order.status == "delivered"
        assert order.is_terminal

    def test_payment_status_and_notes(self):
        order = _place()
        order.update_status("confirmed", payment_status="paid", notes="Paid at counter")
        assert (order.status, order.payment_status, order.admin_notes) == ("confirmed", "paid", "Paid at counter")

    def test_payment_status_kept_when_omitted(self):
        order = _place()
        order.update_status("shipped")
        assert order.payment_status == "pending"

    def test_raises_status_changed(self):
        order = _place()
        order.update_status("cancelled")
        event = [e for e in order._events if isinstance(e, OrderStatusChanged)][0]
        assert (event.previous_status, event.new_status) == ("pending", "cancelled")

    def test_unknown_status_rejected(self):
        order = _place()
        with pytest.raises(ValidationError):
            order.update_status("lost")
        assert order.status == "pending"


class TestOrderNumbers:
    def test_format(self):
        number = generate_order_number("DTU", now_ms=1700000123456, choice=lambda alphabet: "Z")
        assert number == "DTU123456ZZZZZZ"

    def test_uses_uppercase_alphanumerics(self):
        number = generate_order_number("DTU")
        assert len(number) == 15
        assert number[3:].isalnum()
        assert number[3:] == number[3:].upper()

    def test_ten_thousand_allocations_are_unique(self):
        issued = set()
        for _ in range(10_000):
            issued.add(allocate_order_number(issued.__contains__, prefix="DTU", attempts=10))
        assert len(issued) == 10_000

    def test_collision_regenerates(self):
        candidates = iter(["DTU1", "DTU1", "DTU2"])
        number = allocate_order_number({"DTU1"}.__contains__, "DTU", 10, generate=lambda prefix: next(candidates))
        assert number == "DTU2"

    def test_exhaustion(self):
        with pytest.raises(OrderNumberExhausted) as exc:
            allocate_order_number(lambda n: True, "DTU", 10, generate=lambda prefix: "DTU1")
        assert exc.value.attempts == 10
        assert str(exc.value) == "Failed to generate unique order number"

    def test_longest_allowed_prefix_fits_the_order(self):
        prefix = "P" * MAX_PREFIX_LENGTH
        order = _place(order_number=generate_order_number(prefix))
        assert order.order_number.startswith(prefix)

    def test_settings_reject_a_prefix_that_cannot_fit(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(order_number_prefix="P" * (MAX_PREFIX_LENGTH + 1))
