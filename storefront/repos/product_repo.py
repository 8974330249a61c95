from typing import List

from sqlalchemy.orm import Session

from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.repos.base import Repository


class ProductRepo(Repository[Product]):
    def __init__(self, db: Session):
        super().__init__(db, Product)

    def list_by_price(self) -> List[Product]:
        return self.list(Product.price, Product.id)

    def orders_containing(self, product_id: int) -> List[Order]:
        return (
            self.db.query(Order)
            .join(OrderItem, OrderItem.order_id == Order.id)
            .filter(OrderItem.product_id == product_id)
            .distinct()
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )
