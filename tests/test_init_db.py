import pytest
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.security import verify_password
from storefront.db.init_db import CATALOG, init_db
from storefront.models.product import Product
from storefront.models.user import User


def test_init_db_seeds_admin_and_catalog_once(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "bootstrap")

    init_db(db_session)
    init_db(db_session)

    admin = db_session.query(User).filter(User.name == settings.DEFAULT_ADMIN_NAME).one()
    assert verify_password("bootstrap", admin.password_hash)
    assert db_session.query(Product).count() == len(CATALOG)


def test_init_db_without_admin_password_skips_admin(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "")

    init_db(db_session)

    assert db_session.query(User).count() == 0
    assert db_session.query(Product).count() == len(CATALOG)


def test_init_db_without_admin_password_fails_in_production(db_session: Session, monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_ADMIN_PASSWORD", "")
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")

    with pytest.raises(RuntimeError):
        init_db(db_session)
