"""Admin order status update — command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus, PaymentStatus
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    payment_status = String(choices=PaymentStatus)
    notes = String(max_length=500)


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.update_status(command.status, payment_status=command.payment_status, notes=command.notes)
        repo.add(order)

        logger.info(
            "order_status_updated",
            order_number=order.order_number,
            status=order.status,
            payment_status=order.payment_status,
        )
        return order.status
