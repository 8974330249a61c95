import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional

from storefront.api.deps import RequestContext, get_current_user, get_request_context, skip_authorization
from storefront.api.flash import flash, pop_flash
from storefront.core.config import settings
from storefront.core.rate_limiter import limiter
from storefront.db.session import get_db
from storefront.middleware.csrf import generate_csrf_token, set_csrf_cookie
from storefront.models.user import User
from storefront.schemas.session import LoginForm
from storefront.services.auth_service import authenticate
from storefront.utils.response import success

router = APIRouter()
logger = structlog.get_logger()

INVALID_CREDENTIALS_MESSAGE = "Invalid user/password combination"
LOGGED_OUT_MESSAGE = "Logged out"


async def _read_login_form(request: Request) -> LoginForm:
    content_type = request.headers.get("content-type", "")
    try:
        if "application/json" in content_type:
            payload = await request.json()
        else:
            form = await request.form()
            payload = dict(form)
    except ValueError:
        return LoginForm()

    if not isinstance(payload, dict):
        return LoginForm()
    try:
        return LoginForm(**payload)
    except ValidationError:
        return LoginForm()


@router.get(
    "/login",
    summary="Login page",
    description="Returns pending notices for the login form and the currently logged-in user name, if any.",
)
@skip_authorization
def new(request: Request, current_user: Optional[User] = Depends(get_current_user)):
    return success(
        data={
            "flash": pop_flash(request),
            "logged_in_as": current_user.name if current_user else None,
        },
        message="Please log in",
    )


@router.post(
    "/login",
    summary="Login user",
    description="""
Authenticates a user against name and password (JSON or form body).

Behavior:
1. On success stores the user id in the session and redirects to the page
   originally requested, or to the default landing page
2. On failure redirects back to the login page with a generic alert; an
   unknown name and a wrong password are indistinguishable
""",
    responses={303: {"description": "Redirect after login attempt"}},
)
@skip_authorization
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def create(
    request: Request,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    credentials = await _read_login_form(request)

    user = authenticate(db, credentials.name, credentials.password)
    if user is None:
        flash(request, "alert", INVALID_CREDENTIALS_MESSAGE)
        return RedirectResponse(settings.LOGIN_PATH, status_code=status.HTTP_303_SEE_OTHER)

    context.log_in(user)
    logger.info("user_logged_in", user_id=user.id)
    return RedirectResponse(
        context.redirect_back_or(settings.DEFAULT_LANDING_PATH),
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.delete("/logout", summary="Logout user")
@skip_authorization
def destroy(
    request: Request,
    context: RequestContext = Depends(get_request_context),
):
    if context.logged_in:
        logger.info("user_logged_out", user_id=context.user_id)
    context.log_out()
    flash(request, "notice", LOGGED_OUT_MESSAGE)
    return RedirectResponse(settings.STORE_PATH, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/csrf-token", summary="Issue CSRF token cookie")
@skip_authorization
def get_csrf_token():
    token = generate_csrf_token()
    response = JSONResponse(content=success(message="CSRF token set"))
    set_csrf_cookie(response, token)
    return response
