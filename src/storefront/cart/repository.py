"""Repository for the ShoppingCart aggregate."""

from storefront.cart.cart import ShoppingCart
from storefront.domain import storefront


@storefront.repository(part_of=ShoppingCart)
class CartRepository:
    def for_user(self, user_id) -> ShoppingCart | None:
        return self._dao.query.filter(user_id=user_id).all().first

    def for_user_or_new(self, user_id) -> ShoppingCart:
        """The user's cart, or a fresh unsaved one. Carts are created lazily."""
        return self.for_user(user_id) or ShoppingCart.create(user_id=user_id)
