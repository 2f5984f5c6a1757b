"""Cart item management — commands and handler."""

import json

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.errors import NotFound


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    selected_variants = Text()  # JSON: [{kind, value}]


@storefront.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="ShoppingCart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get(command.product_id)
        selected = json.loads(command.selected_variants) if command.selected_variants else []

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user_or_new(command.user_id)
        item = cart.add_item(product, command.quantity, selected)
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        if cart is None:
            raise NotFound("Cart not found")

        item = cart.find_item(command.item_id)
        if item is None:
            raise NotFound(f"Item {command.item_id} is not in the cart")

        product = current_domain.repository_for(Product)._dao.query.filter(id=item.product_id).all().first
        if product is None:
            raise NotFound(f"Product {item.product_id} no longer exists")

        cart.update_item_quantity(command.item_id, command.quantity, product)
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        if cart is None or not cart.remove_item(command.item_id):
            return False
        repo.add(cart)
        return True

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user_or_new(command.user_id)
        cart.clear()
        repo.add(cart)
