from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.models.product import Product


@pytest.fixture()
def production_mode(monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")


def _create_product(db: Session) -> Product:
    product = Product(name="Guarded", price=Decimal("9.00"))
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def test_state_change_without_csrf_token_is_rejected(client: TestClient, db_session: Session, production_mode):
    product = _create_product(db_session)

    response = client.post("/line_items", json={"product_id": product.id})

    assert response.status_code == 403
    assert response.json()["message"] == "CSRF validation failed"


def test_state_change_with_matching_csrf_token_is_accepted(client: TestClient, db_session: Session, production_mode):
    product = _create_product(db_session)
    token = client.get("/csrf-token").cookies.get("csrf_token")
    assert token is not None
    client.cookies.set("csrf_token", token)

    response = client.post(
        "/line_items",
        json={"product_id": product.id},
        headers={"X-CSRF-Token": token},
    )

    assert response.status_code == 201


def test_login_and_logout_are_exempt(client: TestClient, production_mode):
    login = client.post("/login", data={"name": "x", "password": "y"}, follow_redirects=False)
    logout = client.delete("/logout", follow_redirects=False)

    assert login.status_code == 303
    assert logout.status_code == 303


def test_csrf_is_not_enforced_outside_production(client: TestClient, db_session: Session):
    product = _create_product(db_session)

    response = client.post("/line_items", json={"product_id": product.id})

    assert response.status_code == 201
