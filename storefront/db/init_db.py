from decimal import Decimal
import logging

from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.security import hash_password
from storefront.db.base import Base
from storefront.models.product import Product
from storefront.models.user import User

logger = logging.getLogger(__name__)

CATALOG = [
    {
        "name": "Docker for Rails Developers",
        "description": "Build, ship, and run your applications everywhere.",
        "image_url": "ridocker.jpg",
        "price": Decimal("19.95"),
    },
    {
        "name": "Design and Build Great Web APIs",
        "description": "APIs are transforming the business world at an increasing pace.",
        "image_url": "maapis.jpg",
        "price": Decimal("24.95"),
    },
    {
        "name": "Modern CSS with Tailwind",
        "description": "Tailwind CSS is an exciting new CSS framework.",
        "image_url": "tailwind.jpg",
        "price": Decimal("18.95"),
    },
]


def init_db(db: Session) -> None:
    """Create tables and seed the default admin and catalog"""
    Base.metadata.create_all(bind=db.get_bind())

    # Create admin user
    admin = db.query(User).filter(User.name == settings.DEFAULT_ADMIN_NAME).first()
    if not admin:
        seed_password = (settings.DEFAULT_ADMIN_PASSWORD or "").strip()
        if not seed_password:
            message = (
                "Missing admin bootstrap credentials: set DEFAULT_ADMIN_PASSWORD "
                "or create a user manually before launch."
            )
            if settings.is_production:
                logger.error("%s env=%s", message, settings.ENVIRONMENT)
                raise RuntimeError(message)
            logger.warning("%s env=%s", message, settings.ENVIRONMENT)
        else:
            db.add(
                User(
                    name=settings.DEFAULT_ADMIN_NAME,
                    password_hash=hash_password(seed_password),
                )
            )
            logger.info("admin_user_created name=%s", settings.DEFAULT_ADMIN_NAME)

    # Create catalog
    for product_data in CATALOG:
        existing = db.query(Product).filter(Product.name == product_data["name"]).first()
        if not existing:
            db.add(Product(**product_data))
            logger.info("product_created name=%s", product_data["name"])

    db.commit()
    logger.info("database_initialized")


if __name__ == "__main__":
    from storefront.db.session import SessionLocal
    db = SessionLocal()
    init_db(db)
    db.close()
