"""Domain events for the Product and Category aggregates."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    price: Integer(required=True)
    quantity: Integer(required=True)
    category_id: Identifier()


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """The list price of a product changed. Existing cart lines keep their snapshot."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: Integer(required=True)
    new_price: Integer(required=True)


@storefront.event(part_of="Product")
class ProductVariantAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    kind: String(required=True)
    value: String(required=True)
    price: Integer(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units were taken out of stock to fulfil an order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    remaining: Integer(required=True)


@storefront.event(part_of="Product")
class StockReplenished:
    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    new_total: Integer(required=True)


@storefront.event(part_of="Product")
class ProductActivated:
    __version__ = 1

    product_id: Identifier(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id: Identifier(required=True)


@storefront.event(part_of="Category")
class CategoryAdded:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)


@storefront.event(part_of="Category")
class CategoryUpdated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)


@storefront.event(part_of="Category")
class CategoryDeactivated:
    __version__ = 1

    category_id: Identifier(required=True)
