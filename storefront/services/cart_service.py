from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy.orm import Session

from storefront.core.exceptions import RecordNotFound
from storefront.models.cart import Cart, LineItem
from storefront.models.product import Product
from storefront.repos.cart_repo import CartRepo, LineItemRepo
from storefront.schemas.cart import CartLineResponse, CartResponse

logger = structlog.get_logger()


def line_price(line_item: LineItem) -> Decimal:
    """Price of one line: quantity times the product's current price."""
    product = line_item.product
    if product is None:
        raise RecordNotFound("Product", id=line_item.product_id)
    return Decimal(product.price) * line_item.quantity


class CartService:
    """Line item aggregation for a single cart."""

    def __init__(self, db: Session):
        self.carts = CartRepo(db)
        self.line_items = LineItemRepo(db)

    def get_or_create_cart(self, cart_id: Optional[int]) -> Cart:
        cart = self.carts.get(cart_id)
        if cart is None:
            cart = self.carts.save(Cart())
            logger.info("cart_created", cart_id=cart.id, stale_cart_id=cart_id)
        return cart

    def add_product(self, cart: Cart, product: Product) -> LineItem:
        """
        Add one unit of a product to the cart.

        An existing line for the product is incremented; otherwise a new
        line with quantity 1 is attached to the cart.
        """
        current_item = self.line_items.find_in_cart(cart.id, product.id)
        if current_item:
            current_item.quantity += 1
        else:
            current_item = LineItem(product_id=product.id, quantity=1)
            cart.line_items.append(current_item)

        self.line_items.save(current_item)
        logger.info(
            "line_item_added",
            cart_id=cart.id,
            product_id=product.id,
            quantity=current_item.quantity,
        )
        return current_item

    def delete_product(self, cart: Cart, product: Product) -> LineItem:
        """
        Remove one unit of a product from the cart.

        Raises RecordNotFound when the product has no line in this cart.
        The line is kept even when its quantity reaches zero or below.
        """
        del_item = self.line_items.find_in_cart(cart.id, product.id)
        if del_item is None:
            raise RecordNotFound("LineItem", cart_id=cart.id, product_id=product.id)

        del_item.quantity -= 1
        self.line_items.save(del_item)
        logger.info(
            "line_item_decremented",
            cart_id=cart.id,
            product_id=product.id,
            quantity=del_item.quantity,
        )
        return del_item

    def remove_line_item(self, cart: Cart, line_item_id: int) -> None:
        line_item = self.line_items.find_by(id=line_item_id, cart_id=cart.id)
        if line_item is None:
            raise RecordNotFound("LineItem", id=line_item_id, cart_id=cart.id)
        cart.line_items.remove(line_item)
        self.line_items.db.flush()

    def total_price(self, cart: Cart) -> Decimal:
        return sum((line_price(item) for item in cart.line_items), Decimal("0"))

    def total_items(self, cart: Cart) -> int:
        return sum(item.quantity for item in cart.line_items)

    def destroy_cart(self, cart: Cart) -> None:
        cart_id = cart.id
        self.carts.delete(cart)
        logger.info("cart_destroyed", cart_id=cart_id)

    def summarize(self, cart: Cart) -> CartResponse:
        return CartResponse(
            id=cart.id,
            created_at=cart.created_at,
            line_items=[
                CartLineResponse(
                    id=item.id,
                    product_id=item.product_id,
                    product_name=item.product.name if item.product else None,
                    quantity=item.quantity,
                    unit_price=item.product.price if item.product else None,
                    line_price=line_price(item),
                )
                for item in cart.line_items
            ],
            total_items=self.total_items(cart),
            total_price=self.total_price(cart),
        )
