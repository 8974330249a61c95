from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_cart, skip_authorization
from storefront.core.exceptions import ProductNotFound
from storefront.db.session import get_db
from storefront.models.cart import Cart
from storefront.models.product import Product
from storefront.repos.cart_repo import LineItemRepo
from storefront.repos.product_repo import ProductRepo
from storefront.schemas.cart import LineItemCreate, LineItemResponse
from storefront.services.cart_service import CartService
from storefront.utils.response import success

router = APIRouter()


def _get_product(db: Session, product_id: int) -> Product:
    product = ProductRepo(db).get(product_id)
    if not product:
        raise ProductNotFound()
    return product


@router.get("")
def list_line_items(db: Session = Depends(get_db)):
    line_items = LineItemRepo(db).list()
    return success(data=[LineItemResponse.model_validate(item) for item in line_items])


@router.post("", status_code=status.HTTP_201_CREATED)
@skip_authorization
def create_line_item(
    line_item_in: LineItemCreate,
    cart: Cart = Depends(get_current_cart),
    db: Session = Depends(get_db),
):
    """Add one unit of a product to the session cart"""
    service = CartService(db)
    line_item = service.add_product(cart, _get_product(db, line_item_in.product_id))
    db.commit()
    db.refresh(line_item)

    return success(
        data={
            "line_item": LineItemResponse.model_validate(line_item),
            "cart": service.summarize(cart),
        },
        message="Line item was successfully created",
    )


@router.post("/decrement")
@skip_authorization
def decrement_line_item(
    line_item_in: LineItemCreate,
    cart: Cart = Depends(get_current_cart),
    db: Session = Depends(get_db),
):
    """Remove one unit of a product already in the session cart"""
    service = CartService(db)
    line_item = service.delete_product(cart, _get_product(db, line_item_in.product_id))
    db.commit()
    db.refresh(line_item)

    return success(
        data={
            "line_item": LineItemResponse.model_validate(line_item),
            "cart": service.summarize(cart),
        },
        message="Line item was successfully updated",
    )


@router.get("/{line_item_id}")
def get_line_item(line_item_id: int, db: Session = Depends(get_db)):
    return success(data=LineItemResponse.model_validate(LineItemRepo(db).get_or_raise(line_item_id)))


@router.delete("/{line_item_id}")
@skip_authorization
def delete_line_item(
    line_item_id: int,
    cart: Cart = Depends(get_current_cart),
    db: Session = Depends(get_db),
):
    service = CartService(db)
    service.remove_line_item(cart, line_item_id)
    db.commit()
    return success(data=service.summarize(cart), message="Line item was successfully destroyed")
