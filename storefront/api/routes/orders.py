from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.api.deps import RequestContext, get_current_cart, get_request_context, skip_authorization
from storefront.db.session import get_db
from storefront.models.cart import Cart
from storefront.models.order import Order
from storefront.repos.base import Repository
from storefront.schemas.order import OrderCreate, OrderResponse, OrderUpdate
from storefront.services.order_service import place_order
from storefront.utils.response import success

router = APIRouter()


@router.get("")
def list_orders(db: Session = Depends(get_db)):
    orders = Repository(db, Order).list(Order.created_at.desc(), Order.id.desc())
    return success(data=[OrderResponse.model_validate(order) for order in orders])


@router.post("", status_code=status.HTTP_201_CREATED)
@skip_authorization
def create_order(
    order_in: OrderCreate,
    cart: Cart = Depends(get_current_cart),
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Check out the session cart"""
    order = place_order(
        db,
        cart,
        name=order_in.name,
        address=order_in.address,
        email=order_in.email,
        pay_type=order_in.pay_type,
    )
    db.commit()
    db.refresh(order)
    context.forget_cart()

    return success(data=OrderResponse.model_validate(order), message="Thank you for your order.")


@router.get("/{order_id}")
def get_order(order_id: int, db: Session = Depends(get_db)):
    return success(data=OrderResponse.model_validate(Repository(db, Order).get_or_raise(order_id)))


@router.put("/{order_id}")
@router.patch("/{order_id}")
def update_order(order_id: int, order_in: OrderUpdate, db: Session = Depends(get_db)):
    order = Repository(db, Order).get_or_raise(order_id)
    for field, value in order_in.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(order, field, value)
    db.commit()
    db.refresh(order)
    return success(data=OrderResponse.model_validate(order), message="Order was successfully updated")


@router.delete("/{order_id}")
def delete_order(order_id: int, db: Session = Depends(get_db)):
    repo = Repository(db, Order)
    repo.delete(repo.get_or_raise(order_id))
    db.commit()
    return success(message="Order was successfully destroyed")
