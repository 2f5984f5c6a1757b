"""Product details, pricing and variants — commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=100)
    description: String(max_length=2000)
    short_description: String(max_length=200)
    compare_price: Integer(min_value=0)
    category_id: Identifier()
    images: Text()
    tags: Text()
    is_featured: Boolean()


@storefront.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Integer(required=True, min_value=0)


@storefront.command(part_of="Product")
class AddProductVariant:
    product_id: Identifier(required=True)
    kind: String(required=True, max_length=50)
    value: String(required=True, max_length=50)
    price: Integer(default=0, min_value=0)


@storefront.command_handler(part_of=Product)
class ManageProductDetailsHandler:
    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        if command.category_id:
            current_domain.repository_for(Category).get(command.category_id)

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            short_description=command.short_description,
            category_id=command.category_id,
            compare_price=command.compare_price,
            images=json.loads(command.images) if command.images else None,
            tags=json.loads(command.tags) if command.tags else None,
            is_featured=command.is_featured,
        )
        repo.add(product)

    @handle(ChangeProductPrice)
    def change_product_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price)
        repo.add(product)

    @handle(AddProductVariant)
    def add_product_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        variant = product.add_variant(kind=command.kind, value=command.value, price=command.price or 0)
        repo.add(product)
        return str(variant.id)
