from dataclasses import dataclass
from typing import Any, Callable, MutableMapping, Optional

import structlog
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.core.exceptions import LoginRequired
from storefront.db.session import get_db
from storefront.models.cart import Cart
from storefront.models.user import User
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService

logger = structlog.get_logger()

USER_ID_KEY = "user_id"
CART_ID_KEY = "cart_id"
RETURN_TO_KEY = "return_to"


@dataclass
class RequestContext:
    """Identity carried by the session cookie for the current request."""

    session: MutableMapping[str, Any]

    @property
    def user_id(self) -> Optional[int]:
        return self.session.get(USER_ID_KEY)

    @property
    def cart_id(self) -> Optional[int]:
        return self.session.get(CART_ID_KEY)

    @property
    def logged_in(self) -> bool:
        return self.user_id is not None

    def log_in(self, user: User) -> None:
        self.session[USER_ID_KEY] = user.id

    def log_out(self) -> None:
        self.session.pop(USER_ID_KEY, None)

    def use_cart(self, cart: Cart) -> None:
        self.session[CART_ID_KEY] = cart.id

    def forget_cart(self) -> None:
        self.session.pop(CART_ID_KEY, None)

    def store_location(self, location: str) -> None:
        self.session[RETURN_TO_KEY] = location

    def redirect_back_or(self, default: str) -> str:
        return self.session.pop(RETURN_TO_KEY, None) or default


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(session=request.session)


def skip_authorization(endpoint: Callable) -> Callable:
    """Mark an endpoint as reachable without a logged-in user."""
    endpoint.skip_authorization = True
    return endpoint


def _requested_location(request: Request) -> str:
    location = request.url.path
    if request.url.query:
        location = f"{location}?{request.url.query}"
    return location


def authorize(
    request: Request,
    db: Session = Depends(get_db),
) -> None:
    """Application-wide guard: every endpoint requires a known user unless exempted."""
    endpoint = request.scope.get("endpoint")
    if getattr(endpoint, "skip_authorization", False):
        return

    context = get_request_context(request)
    if UserRepo(db).get(context.user_id) is not None:
        return

    return_to = _requested_location(request) if request.method == "GET" else None
    logger.info(
        "authorization_required",
        method=request.method,
        path=request.url.path,
    )
    raise LoginRequired(return_to=return_to)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[User]:
    return UserRepo(db).get(get_request_context(request).user_id)


def get_current_cart(
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> Cart:
    """The session's cart, created and remembered on first use."""
    cart = CartService(db).get_or_create_cart(context.cart_id)
    if context.cart_id != cart.id:
        db.commit()
        context.use_cart(cart)
    return cart
