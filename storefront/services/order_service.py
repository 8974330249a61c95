from decimal import Decimal

import structlog
from sqlalchemy.orm import Session

from storefront.core.exceptions import APIError
from storefront.models.cart import Cart
from storefront.models.order import Order, OrderItem, PayType
from storefront.repos.base import Repository
from storefront.services.cart_service import CartService, line_price

logger = structlog.get_logger()


def place_order(
    db: Session,
    cart: Cart,
    *,
    name: str,
    address: str,
    email: str,
    pay_type: PayType,
) -> Order:
    """
    Turn a cart into an order.

    Each line item is copied into an OrderItem snapshot, then the cart is
    destroyed. No payment is taken.

    Raises:
        APIError: the cart has no line items
    """
    if not cart.line_items:
        raise APIError(status_code=400, message="Your cart is empty")

    cart_service = CartService(db)
    order = Order(name=name, address=address, email=email, pay_type=pay_type)

    total = Decimal("0")
    for item in cart.line_items:
        price = line_price(item)
        order.items.append(
            OrderItem(
                product_id=item.product_id,
                product_name=item.product.name,
                quantity=item.quantity,
                unit_price=item.product.price,
                total_price=price,
            )
        )
        total += price
    order.total_amount = total

    Repository(db, Order).save(order)
    cart_id = cart.id
    cart_service.destroy_cart(cart)

    logger.info(
        "order_placed",
        order_id=order.id,
        cart_id=cart_id,
        item_count=len(order.items),
        total_amount=str(total),
    )
    return order
