"""Order aggregate, the immutable record of a checkout.

Lines are copies of what the customer bought (name, image, unit price and
variants at the time of purchase), never references to live products.
After placement only the admin status update mutates an order.

Order status:    pending → confirmed → processing → shipped → delivered
                 cancelled is reachable from any non-terminal state
Payment status:  pending → paid | failed, paid → refunded

Transitions are admin-driven and only enum membership is checked.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.catalogue.product import dump_variants, load_variants
from storefront.domain import storefront
from storefront.identity.contact import check_phone, check_zip_code
from storefront.order.events import OrderPlaced, OrderStatusChanged
from storefront.order.numbering import NUMBER_MAX_LENGTH


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = "cash_on_delivery"
    UPI = "upi"
    CARD = "card"
    NET_BANKING = "net_banking"


TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def _member(enum_cls, value, field):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError({field: [f"'{value}' is not one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships, as entered at checkout. Later profile edits do not change it."""

    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=10)
    street = String(required=True, max_length=200)
    city = String(required=True, max_length=50)
    state = String(required=True, max_length=50)
    zip_code = String(required=True, max_length=6)
    country = String(max_length=50, default="India")
    landmark = String(max_length=100)

    @invariant.post
    def contact_details_must_be_valid(self):
        check_phone("phone", self.phone)
        check_zip_code("zip_code", self.zip_code)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=100)
    product_image = String(max_length=500)
    price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    selected_variants = Text()  # JSON: [{kind, value, price}]

    @property
    def variants(self):
        return load_variants(self.selected_variants)

    @property
    def line_total(self):
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=NUMBER_MAX_LENGTH, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    subtotal = Integer(required=True, min_value=0)
    tax = Integer(default=0, min_value=0)
    shipping = Integer(default=0, min_value=0)
    total_amount = Integer(required=True, min_value=0)
    currency = String(max_length=3, default="INR")
    shipping_address = ValueObject(ShippingAddress, required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    notes = String(max_length=500)
    admin_notes = String(max_length=500)
    idempotency_key = String(max_length=100)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_components(self):
        if self.total_amount != (self.subtotal or 0) + (self.tax or 0) + (self.shipping or 0):
            raise ValidationError({"total_amount": ["Total must equal subtotal + tax + shipping"]})

    @invariant.post
    def subtotal_must_match_lines(self):
        if self.items and self.subtotal != sum(item.line_total for item in self.items):
            raise ValidationError({"subtotal": ["Subtotal does not match the order lines"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        user_id,
        lines,
        shipping_address,
        payment_method,
        tax=0,
        shipping=0,
        notes=None,
        idempotency_key=None,
        currency="INR",
    ):
        """Create a pending order from priced lines.

        ``lines`` are dicts with product_id, product_name, product_image,
        price, quantity and the resolved selected_variants.
        """
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        items = [
            OrderItem(
                product_id=line["product_id"],
                product_name=line["product_name"],
                product_image=line.get("product_image"),
                price=line["price"],
                quantity=line["quantity"],
                selected_variants=dump_variants(line.get("selected_variants")),
            )
            for line in lines
        ]
        subtotal = sum(item.line_total for item in items)
        now = datetime.now(UTC)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            total_amount=subtotal + tax + shipping,
            currency=currency,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=_member(PaymentMethod, payment_method, "payment_method").value,
            status=OrderStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            notes=notes,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            for item in items:
                order.add_items(item)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {"product_id": str(item.product_id), "quantity": item.quantity, "price": item.price}
                        for item in items
                    ]
                ),
                total_amount=order.total_amount,
                payment_method=order.payment_method,
            )
        )
        return order

    @property
    def is_terminal(self):
        return OrderStatus(self.status) in TERMINAL_STATUSES

    # -------------------------------------------------------------------
    # Admin status update
    # -------------------------------------------------------------------
    def update_status(self, status, payment_status=None, notes=None):
        """Set any enumerated status. Sequence is not enforced."""
        new_status = _member(OrderStatus, status, "status")
        new_payment_status = (
            _member(PaymentStatus, payment_status, "payment_status")
            if payment_status
            else PaymentStatus(self.payment_status)
        )

        previous_status = self.status
        previous_payment_status = self.payment_status

        self.status = new_status.value
        self.payment_status = new_payment_status.value
        if notes is not None:
            self.admin_notes = notes
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous_status,
                new_status=self.status,
                previous_payment_status=previous_payment_status,
                new_payment_status=self.payment_status,
            )
        )
