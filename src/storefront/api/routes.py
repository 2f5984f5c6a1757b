"""Every router the storefront app mounts, in mounting order."""

from storefront.api.admin import admin_router
from storefront.api.cart import cart_router
from storefront.api.catalogue import category_router, product_router
from storefront.api.orders import order_router
from storefront.api.users import me_router, user_router

ROUTERS = [product_router, category_router, user_router, me_router, cart_router, order_router, admin_router]
