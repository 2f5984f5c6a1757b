"""Repository for the Order aggregate."""

from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.order.order import Order

ORDER_SORT_FIELDS = ("created_at", "total_amount")


@storefront.repository(part_of=Order)
class OrderRepository:
    def number_taken(self, order_number) -> bool:
        return self._dao.query.filter(order_number=order_number).all().first is not None

    def by_idempotency_key(self, user_id, key) -> Order | None:
        return self._dao.query.filter(user_id=user_id, idempotency_key=key).all().first

    def visible_to(self, order_id, user_id, is_admin=False) -> Order:
        """Fetch an order its owner, or any admin, may read.

        Other users get ``NotFound`` so order ids cannot be guessed.
        """
        order = self._dao.query.filter(id=order_id).all().first
        if order is None or (not is_admin and str(order.user_id) != str(user_id)):
            raise NotFound(f"Order {order_id} not found")
        return order

    def for_user(self, user_id, page=1, limit=10):
        result = (
            self._dao.query.filter(user_id=user_id)
            .order_by("-created_at")
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return result.items, result.total

    def search(self, status=None, payment_status=None, sort_by="created_at", descending=True, page=1, limit=10):
        """Admin listing. Returns ``(orders, total)``."""
        criteria = {}
        if status:
            criteria["status"] = status
        if payment_status:
            criteria["payment_status"] = payment_status

        if sort_by not in ORDER_SORT_FIELDS:
            sort_by = "created_at"

        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        result = (
            query.order_by(f"-{sort_by}" if descending else sort_by)
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return result.items, result.total
