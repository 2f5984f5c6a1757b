"""Checkout: converts a user's selection into a pending order.

The handler runs as one unit of work: the order, every stock withdrawal and
the cart clear commit together or not at all. The stock pre-check is only an
early exit; the authority is the catalogue's compare-and-swap decrement.
"""

import json
from collections import Counter

from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import MAX_LINE_QUANTITY, ShoppingCart
from storefront.catalogue.product import Product
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.errors import ProductUnavailable, ValidationFailed
from storefront.order.numbering import allocate_order_number
from storefront.order.order import Order, PaymentMethod
from storefront.storage import storage_guard
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, selected_variants}
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, choices=PaymentMethod)
    subtotal = Integer(required=True, min_value=0)
    tax = Integer(default=0, min_value=0)
    shipping = Integer(default=0, min_value=0)
    total_amount = Integer(required=True, min_value=0)
    notes = String(max_length=500)
    idempotency_key = String(max_length=100)


def receipt(order):
    return {
        "order_id": str(order.id),
        "order_number": order.order_number,
        "total_amount": order.total_amount,
        "status": order.status,
    }


def _parse_items(raw):
    items = json.loads(raw) if raw else []
    if not items:
        raise ValidationFailed(["Order must contain at least one item"])

    reasons = []
    for index, item in enumerate(items, start=1):
        if not item.get("product_id"):
            reasons.append(f"Item {index} is missing a product")
        quantity = item.get("quantity")
        if not isinstance(quantity, int) or not 1 <= quantity <= MAX_LINE_QUANTITY:
            reasons.append(f"Item {index} quantity must be between 1 and {MAX_LINE_QUANTITY}")
    if reasons:
        raise ValidationFailed(reasons, message="Invalid order items")
    return items


def _load_purchasable(items):
    """Fetch every product and run the early stock check on the combined demand."""
    dao = current_domain.repository_for(Product)._dao
    demand = Counter()
    for item in items:
        demand[str(item["product_id"])] += item["quantity"]

    products = {}
    for product_id, quantity in demand.items():
        product = dao.query.filter(id=product_id).all().first
        if product is None:
            raise ProductUnavailable(product_id, f"Product {product_id} no longer exists")
        product.ensure_purchasable(quantity)
        products[product_id] = product
    return products


def _price_lines(items, products, cart):
    """Price each line from the cart's snapshot, falling back to the live catalogue."""
    lines = []
    for item in items:
        product = products[str(item["product_id"])]
        variants = product.resolve_variants(item.get("selected_variants"))
        cart_line = cart.find_line(product.id, variants) if cart else None
        lines.append(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "product_image": product.primary_image,
                "price": cart_line.price if cart_line else product.unit_price(variants),
                "quantity": item["quantity"],
                "selected_variants": variants,
            }
        )
    return lines


def _check_client_totals(command, subtotal, tolerance):
    expected_total = subtotal + (command.tax or 0) + (command.shipping or 0)
    reasons = []
    if abs(command.subtotal - subtotal) > tolerance:
        reasons.append(f"Subtotal {command.subtotal} does not match the computed subtotal {subtotal}")
    if abs(command.total_amount - expected_total) > tolerance:
        reasons.append(f"Total {command.total_amount} does not match the computed total {expected_total}")
    if reasons:
        raise ValidationFailed(reasons, message="Order totals do not match")


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        settings = get_settings()
        order_repo = current_domain.repository_for(Order)

        if command.idempotency_key:
            existing = order_repo.by_idempotency_key(command.user_id, command.idempotency_key)
            if existing is not None:
                logger.info("order_replayed", order_number=existing.order_number)
                return receipt(existing)

        items = _parse_items(command.items)
        products = _load_purchasable(items)

        cart_repo = current_domain.repository_for(ShoppingCart)
        cart = cart_repo.for_user(command.user_id)

        lines = _price_lines(items, products, cart)
        _check_client_totals(command, sum(line["price"] * line["quantity"] for line in lines), settings.total_tolerance)

        order = Order.place(
            order_number=allocate_order_number(
                order_repo.number_taken,
                prefix=settings.order_number_prefix,
                attempts=settings.order_number_attempts,
            ),
            user_id=command.user_id,
            lines=lines,
            shipping_address=json.loads(command.shipping_address),
            payment_method=command.payment_method,
            tax=command.tax or 0,
            shipping=command.shipping or 0,
            notes=command.notes,
            idempotency_key=command.idempotency_key,
            currency=settings.currency,
        )
        order_repo.add(order)

        product_repo = current_domain.repository_for(Product)
        for line in lines:
            product_repo.decrement_stock(line["product_id"], line["quantity"])

        if cart is not None and cart.items:
            cart.clear()
            cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_number=order.order_number,
            user_id=str(command.user_id),
            total_amount=order.total_amount,
            lines=len(lines),
        )
        return receipt(order)


def place_order(command, attempts=None):
    """Process ``PlaceOrder``, retrying the whole checkout when a concurrent writer wins.

    Each retry starts a fresh unit of work, so stock and cart are re-read.
    """
    attempts = attempts or get_settings().checkout_attempts

    for attempt in range(1, attempts + 1):
        try:
            with storage_guard("place_order"):
                return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError:
            if attempt == attempts:
                logger.error("checkout_conflict_exhausted", user_id=str(command.user_id), attempts=attempts)
                raise
            logger.warning("checkout_conflict_retry", user_id=str(command.user_id), attempt=attempt)
