"""Repositories for the Product and Category aggregates."""

from protean.exceptions import ExpectedVersionError

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCT_SORTS = {
    "newest": "-created_at",
    "oldest": "created_at",
    "price_asc": "price",
    "price_desc": "-price",
    "name": "name",
}


@storefront.repository(part_of=Product)
class ProductRepository:
    def decrement_stock(self, product_id, amount, attempts=None) -> Product:
        """Withdraw ``amount`` units as a compare-and-swap on the aggregate version.

        Every attempt reloads the product, so the stock decision is always made
        on the latest committed state. Losing a race to another writer surfaces
        as ``ExpectedVersionError`` and triggers a reload; once the attempts run
        out the conflict propagates to the caller.
        """
        attempts = attempts or get_settings().stock_decrement_attempts

        for attempt in range(1, attempts + 1):
            product = self.get(product_id)
            product.withdraw_stock(amount)
            try:
                self.add(product)
            except ExpectedVersionError:
                logger.info(
                    "stock_decrement_conflict",
                    product_id=str(product_id),
                    amount=amount,
                    attempt=attempt,
                )
                if attempt == attempts:
                    raise
                continue

            logger.debug("stock_decremented", product_id=str(product_id), amount=amount, remaining=product.quantity)
            return product

    def search(
        self,
        category_id=None,
        featured=None,
        min_price=None,
        max_price=None,
        name=None,
        sort="newest",
        page=1,
        limit=10,
        include_inactive=False,
    ):
        """Page through products. Returns ``(products, total)``."""
        criteria = {}
        if not include_inactive:
            criteria["is_active"] = True
        if category_id:
            criteria["category_id"] = category_id
        if featured is not None:
            criteria["is_featured"] = featured
        if min_price is not None:
            criteria["price__gte"] = min_price
        if max_price is not None:
            criteria["price__lte"] = max_price
        if name:
            criteria["name__icontains"] = name

        query = self._dao.query.filter(**criteria) if criteria else self._dao.query
        result = query.order_by(PRODUCT_SORTS.get(sort, "-created_at")).offset((page - 1) * limit).limit(limit).all()
        return result.items, result.total


@storefront.repository(part_of=Category)
class CategoryRepository:
    def active(self) -> list[Category]:
        return self._dao.query.filter(is_active=True).order_by("name").limit(1000).all().items

    def find_by_name(self, name) -> Category | None:
        return self._dao.query.filter(name=name).all().first
