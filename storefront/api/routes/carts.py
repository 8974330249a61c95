import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from storefront.api.deps import RequestContext, get_current_cart, get_request_context, skip_authorization
from storefront.api.flash import flash
from storefront.core.config import settings
from storefront.db.session import get_db
from storefront.models.cart import Cart
from storefront.repos.cart_repo import CartRepo
from storefront.services.cart_service import CartService
from storefront.utils.response import success

router = APIRouter()
logger = structlog.get_logger()


@router.get("")
def list_carts(db: Session = Depends(get_db)):
    service = CartService(db)
    return success(data=[service.summarize(cart) for cart in CartRepo(db).list()])


@router.get("/current")
@skip_authorization
def show_current_cart(
    cart: Cart = Depends(get_current_cart),
    db: Session = Depends(get_db),
):
    return success(data=CartService(db).summarize(cart))


@router.delete("/current")
@skip_authorization
def empty_current_cart(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Destroy the session cart and its line items."""
    cart = CartRepo(db).get(context.cart_id)
    if cart is not None:
        CartService(db).destroy_cart(cart)
        db.commit()
    context.forget_cart()

    flash(request, "notice", "Your cart is currently empty")
    return RedirectResponse(settings.STORE_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{cart_id}")
def show_cart(cart_id: int, request: Request, db: Session = Depends(get_db)):
    cart = CartRepo(db).get(cart_id)
    if cart is None:
        logger.warning("invalid_cart_requested", cart_id=cart_id)
        flash(request, "notice", "Invalid cart")
        return RedirectResponse(settings.STORE_PATH, status_code=status.HTTP_303_SEE_OTHER)
    return success(data=CartService(db).summarize(cart))
