"""Read-side cart operations: the cart view and the pre-checkout validation."""

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.errors import ValidationFailed


def live_products(product_ids) -> dict:
    """Map each id to its current product, or ``None`` if it was deleted."""
    dao = current_domain.repository_for(Product)._dao
    return {str(pid): dao.query.filter(id=pid).all().first for pid in set(map(str, product_ids))}


def get_cart(user_id) -> ShoppingCart:
    """The user's cart; an unsaved empty cart when they have never added anything."""
    return current_domain.repository_for(ShoppingCart).for_user_or_new(user_id)


def validate_cart(user_id) -> dict:
    """Re-check every line against the catalogue.

    Raises ``ValidationFailed`` carrying one message per failing line, or
    ``["Cart is empty"]`` when there is nothing to check out.
    """
    cart = current_domain.repository_for(ShoppingCart).for_user(user_id)
    if cart is None or not cart.items:
        raise ValidationFailed(["Cart is empty"])

    problems = cart.problems(live_products(item.product_id for item in cart.items))
    if problems:
        raise ValidationFailed(problems, message="Cart validation failed")

    return {
        "valid": True,
        "item_count": len(cart.items),
        "total_items": cart.total_items,
        "total_amount": cart.total_amount,
    }
