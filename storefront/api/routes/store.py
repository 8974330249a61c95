from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_cart, skip_authorization
from storefront.api.flash import pop_flash
from storefront.db.session import get_db
from storefront.models.cart import Cart
from storefront.repos.product_repo import ProductRepo
from storefront.schemas.product import ProductResponse
from storefront.services.cart_service import CartService
from storefront.utils.response import success

router = APIRouter()


@router.get("/", summary="Store index")
@skip_authorization
def index(
    request: Request,
    cart: Cart = Depends(get_current_cart),
    db: Session = Depends(get_db),
):
    """Catalog ordered by price, cheapest first, with the visitor's cart."""
    products = ProductRepo(db).list_by_price()
    return success(
        data={
            "products": [ProductResponse.model_validate(product) for product in products],
            "cart": CartService(db).summarize(cart),
            "flash": pop_flash(request),
        },
    )
