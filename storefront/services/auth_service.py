from typing import Optional

import structlog
from sqlalchemy.orm import Session

from storefront.core.security import dummy_verify, verify_password
from storefront.models.user import User
from storefront.repos.user_repo import UserRepo

logger = structlog.get_logger()


def authenticate(db: Session, name: str, password: str) -> Optional[User]:
    """
    Resolve a user from a name and password.

    Returns None for an unknown name and for a wrong password alike; callers
    must not tell the two apart.
    """
    user = UserRepo(db).get_by_name(name)
    if user is None:
        dummy_verify()
        logger.info("login_failed", reason="unknown_user")
        return None

    if not verify_password(password, user.password_hash):
        logger.info("login_failed", reason="bad_password", user_id=user.id)
        return None

    return user
