from typing import Optional

from sqlalchemy.orm import Session

from storefront.models.cart import Cart, LineItem
from storefront.repos.base import Repository


class CartRepo(Repository[Cart]):
    def __init__(self, db: Session):
        super().__init__(db, Cart)


class LineItemRepo(Repository[LineItem]):
    def __init__(self, db: Session):
        super().__init__(db, LineItem)

    def find_in_cart(self, cart_id: int, product_id: int) -> Optional[LineItem]:
        return self.find_by(cart_id=cart_id, product_id=product_id)

    def count_for_product(self, product_id: int) -> int:
        return self.db.query(LineItem).filter(LineItem.product_id == product_id).count()
