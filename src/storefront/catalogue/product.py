"""Product aggregate root with the Variant entity.

Prices are integer minor units. ``quantity`` is the stock on hand and is the
only field shared by concurrent checkouts; it is reduced exclusively through
``withdraw_stock`` and the repository's compare-and-swap ``decrement_stock``.
"""

import json
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.errors import InsufficientStock, ProductUnavailable

MAX_IMAGES = 5


def variant_signature(variants) -> tuple:
    """Identity of a variant selection, independent of order and price."""
    return tuple(sorted((str(v["kind"]), str(v["value"])) for v in variants or []))


def dump_variants(variants) -> str:
    return json.dumps(sorted(variants or [], key=lambda v: (v["kind"], v["value"])), sort_keys=True)


def load_variants(raw) -> list[dict]:
    return json.loads(raw) if raw else []


@storefront.entity(part_of="Product")
class Variant:
    """An option such as size or colour with an additive price delta."""

    kind: String(required=True, max_length=50)
    value: String(required=True, max_length=50)
    price: Integer(default=0, min_value=0)


@storefront.aggregate
class Product:
    name: String(required=True, max_length=100)
    description: String(required=True, max_length=2000)
    short_description: String(max_length=200)
    price: Integer(required=True, min_value=0)
    compare_price: Integer(min_value=0)
    category_id: Identifier()
    images: Text()  # JSON array of media-host URLs
    tags: Text()  # JSON array of strings
    variants: HasMany(Variant)
    quantity: Integer(default=0, min_value=0)
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def variant_options_must_be_unique(self):
        seen = set()
        for variant in self.variants:
            key = (variant.kind, variant.value)
            if key in seen:
                raise ValidationError({"variants": [f"Duplicate variant {variant.kind}={variant.value}"]})
            seen.add(key)

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.image_urls) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        quantity=0,
        category_id=None,
        short_description=None,
        compare_price=None,
        images=None,
        tags=None,
        is_featured=False,
    ):
        from storefront.catalogue.events import ProductAdded

        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description,
            short_description=short_description,
            price=price,
            compare_price=compare_price,
            category_id=category_id,
            images=json.dumps(list(images or [])),
            tags=json.dumps(list(tags or [])),
            quantity=quantity,
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=product.id,
                name=name,
                price=price,
                quantity=quantity,
                category_id=category_id,
            )
        )
        return product

    @property
    def image_urls(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def tag_list(self) -> list[str]:
        return json.loads(self.tags) if self.tags else []

    @property
    def primary_image(self) -> str | None:
        urls = self.image_urls
        return urls[0] if urls else None

    @property
    def is_purchasable(self) -> bool:
        return bool(self.is_active)

    def update_details(
        self,
        name=None,
        description=None,
        short_description=None,
        category_id=None,
        compare_price=None,
        images=None,
        tags=None,
        is_featured=None,
    ):
        from storefront.catalogue.events import ProductDetailsUpdated

        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if short_description is not None:
            self.short_description = short_description
        if category_id is not None:
            self.category_id = category_id
        if compare_price is not None:
            self.compare_price = compare_price
        if images is not None:
            self.images = json.dumps(list(images))
        if tags is not None:
            self.tags = json.dumps(list(tags))
        if is_featured is not None:
            self.is_featured = is_featured

        self.updated_at = datetime.now(UTC)
        self.raise_(ProductDetailsUpdated(product_id=self.id, name=self.name))

    def change_price(self, new_price):
        from storefront.catalogue.events import ProductPriceChanged

        previous_price = self.price
        self.price = new_price
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductPriceChanged(product_id=self.id, previous_price=previous_price, new_price=new_price))

    def add_variant(self, kind, value, price=0):
        from storefront.catalogue.events import ProductVariantAdded

        variant = Variant(kind=kind, value=value, price=price)
        self.add_variants(variant)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductVariantAdded(
                product_id=self.id,
                variant_id=variant.id,
                kind=kind,
                value=value,
                price=price,
            )
        )
        return variant

    def find_variant(self, kind, value):
        return next((v for v in self.variants if v.kind == kind and v.value == value), None)

    def resolve_variants(self, selected) -> list[dict]:
        """Match a client selection against this product's variants.

        Returns the canonical ``[{kind, value, price}]`` list with prices taken
        from the catalogue, sorted by kind and value.
        """
        resolved = []
        seen = set()
        for option in selected or []:
            kind, value = option.get("kind"), option.get("value")
            variant = self.find_variant(kind, value)
            if variant is None:
                raise ValidationError({"selected_variants": [f"{self.name} has no {kind} option '{value}'"]})
            if (kind, value) in seen:
                raise ValidationError({"selected_variants": [f"{kind} '{value}' selected more than once"]})
            seen.add((kind, value))
            resolved.append({"kind": variant.kind, "value": variant.value, "price": variant.price})

        return sorted(resolved, key=lambda v: (v["kind"], v["value"]))

    def unit_price(self, resolved_variants) -> int:
        return self.price + sum(v["price"] for v in resolved_variants)

    def ensure_purchasable(self, requested):
        """Raise unless ``requested`` units could be bought right now."""
        if not self.is_purchasable:
            raise ProductUnavailable(str(self.id), f"{self.name} is no longer available")
        if requested > self.quantity:
            raise InsufficientStock(
                str(self.id),
                requested=requested,
                available=self.quantity,
                message=f"Only {self.quantity} units of {self.name} available",
            )

    def withdraw_stock(self, amount):
        from storefront.catalogue.events import StockWithdrawn

        if amount < 1:
            raise ValidationError({"quantity": ["Withdrawal amount must be positive"]})
        self.ensure_purchasable(amount)

        self.quantity -= amount
        self.updated_at = datetime.now(UTC)
        self.raise_(StockWithdrawn(product_id=self.id, quantity=amount, remaining=self.quantity))

    def restock(self, amount):
        from storefront.catalogue.events import StockReplenished

        if amount < 1:
            raise ValidationError({"quantity": ["Restock amount must be positive"]})

        self.quantity += amount
        self.updated_at = datetime.now(UTC)
        self.raise_(StockReplenished(product_id=self.id, quantity=amount, new_total=self.quantity))

    def activate(self):
        from storefront.catalogue.events import ProductActivated

        if self.is_active:
            return
        self.is_active = True
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductActivated(product_id=self.id))

    def deactivate(self):
        from storefront.catalogue.events import ProductDeactivated

        if not self.is_active:
            return
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductDeactivated(product_id=self.id))
