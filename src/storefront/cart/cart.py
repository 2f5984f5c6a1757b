"""Shopping cart aggregate. One per user, converted into an order at checkout.

Each line carries the unit price captured when it was added; later catalogue
price changes do not touch it. Stock, on the other hand, is re-checked
against the live product on every mutation. ``total_amount`` and
``total_items`` are always derived from the lines being persisted.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from storefront.cart.events import CartCleared, CartItemAdded, CartItemQuantityUpdated, CartItemRemoved
from storefront.catalogue.product import dump_variants, load_variants, variant_signature
from storefront.domain import storefront
from storefront.errors import NotFound

MAX_LINE_QUANTITY = 10


def check_line_quantity(quantity):
    if quantity < 1 or quantity > MAX_LINE_QUANTITY:
        raise ValidationError({"quantity": [f"Quantity must be between 1 and {MAX_LINE_QUANTITY}"]})


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=100)
    product_image = String(max_length=500)
    quantity = Integer(required=True, min_value=1, max_value=MAX_LINE_QUANTITY)
    price = Integer(required=True, min_value=0)  # unit price at time of add
    selected_variants = Text()  # JSON: [{kind, value, price}] sorted by kind, value
    added_at = DateTime()

    @property
    def variants(self):
        return load_variants(self.selected_variants)

    @property
    def signature(self):
        return variant_signature(self.variants)

    @property
    def line_total(self):
        return self.price * self.quantity


@storefront.aggregate
class ShoppingCart:
    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    total_amount = Integer(default=0, min_value=0)
    total_items = Integer(default=0, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def totals_must_match_items(self):
        if self.total_amount != sum(item.line_total for item in self.items):
            raise ValidationError({"total_amount": ["Cart total does not match its items"]})
        if self.total_items != sum(item.quantity for item in self.items):
            raise ValidationError({"total_items": ["Cart item count does not match its items"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, total_amount=0, total_items=0, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def find_line(self, product_id, variants):
        signature = variant_signature(variants)
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and i.signature == signature),
            None,
        )

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity, selected_variants=None):
        """Add ``quantity`` of ``product``, merging into a line with the same variant set."""
        check_line_quantity(quantity)
        variants = product.resolve_variants(selected_variants)
        existing = self.find_line(product.id, variants)

        requested = existing.quantity + quantity if existing else quantity
        product.ensure_purchasable(requested)
        check_line_quantity(requested)

        now = datetime.now(UTC)
        with atomic_change(self):
            if existing:
                existing.quantity = requested
                item = existing
            else:
                item = CartItem(
                    product_id=product.id,
                    product_name=product.name,
                    product_image=product.primary_image,
                    quantity=quantity,
                    price=product.unit_price(variants),
                    selected_variants=dump_variants(variants),
                    added_at=now,
                )
                self.add_items(item)

            self._recalculate_totals()
            self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                item_id=str(item.id),
                product_id=str(product.id),
                quantity=quantity,
                price=item.price,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity, product):
        """Set a line's quantity after re-checking the live product. The price snapshot is kept."""
        item = self.find_item(item_id)
        if item is None:
            raise NotFound(f"Item {item_id} is not in the cart")

        check_line_quantity(new_quantity)
        product.ensure_purchasable(new_quantity)

        previous_quantity = item.quantity
        with atomic_change(self):
            item.quantity = new_quantity
            self._recalculate_totals()
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        """Drop a line. Removing an id that is not in the cart changes nothing."""
        item = self.find_item(item_id)
        if item is None:
            return False

        with atomic_change(self):
            self.remove_items(item)
            self._recalculate_totals()
            self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))
        return True

    def clear(self):
        removed = len(self.items)
        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self._recalculate_totals()
            self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), user_id=str(self.user_id), items_removed=removed))

    # -------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------
    def problems(self, products):
        """Collect a message for every line the catalogue can no longer satisfy.

        ``products`` maps product id to the live product, or ``None`` when it
        has been deleted.
        """
        messages = []
        for item in self.items:
            product = products.get(str(item.product_id))
            if product is None:
                messages.append(f"Product {item.product_id} no longer exists")
            elif not product.is_purchasable:
                messages.append(f"{product.name} is no longer available")
            elif item.quantity > product.quantity:
                messages.append(f"Only {product.quantity} units of {product.name} available")
        return messages

    def _recalculate_totals(self):
        self.total_amount = sum(item.line_total for item in self.items)
        self.total_items = sum(item.quantity for item in self.items)
