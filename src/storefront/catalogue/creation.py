"""Product creation — command and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=100)
    description: String(required=True, max_length=2000)
    short_description: String(max_length=200)
    price: Integer(required=True, min_value=0)
    compare_price: Integer(min_value=0)
    quantity: Integer(default=0, min_value=0)
    category_id: Identifier()
    images: Text()  # JSON array of URLs
    tags: Text()  # JSON array of strings
    is_featured: Boolean(default=False)


@storefront.command_handler(part_of=Product)
class AddProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        if command.category_id:
            # Raises ObjectNotFoundError for an unknown category
            current_domain.repository_for(Category).get(command.category_id)

        product = Product.create(
            name=command.name,
            description=command.description,
            short_description=command.short_description,
            price=command.price,
            compare_price=command.compare_price,
            quantity=command.quantity or 0,
            category_id=command.category_id,
            images=json.loads(command.images) if command.images else None,
            tags=json.loads(command.tags) if command.tags else None,
            is_featured=bool(command.is_featured),
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
