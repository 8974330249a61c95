from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.db.session import get_db
from storefront.models.order import Order
from storefront.models.user import User
from storefront.repos.base import Repository
from storefront.utils.response import success

router = APIRouter()


@router.get("", summary="Admin dashboard")
def index(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return success(
        data={
            "user": current_user.name,
            "total_orders": Repository(db, Order).count(),
        },
    )
