from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from storefront.models.cart import LineItem
from storefront.models.product import Product


def _create_product(db: Session, name: str = "Rails Book", price: str = "10.00") -> Product:
    product = Product(name=name, price=Decimal(price))
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def test_add_line_item_as_guest(client: TestClient, db_session: Session):
    product = _create_product(db_session)

    response = client.post("/line_items", json={"product_id": product.id})

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["line_item"]["quantity"] == 1
    assert data["cart"]["total_items"] == 1
    assert data["cart"]["total_price"] == "10.00"


def test_adding_same_product_twice_aggregates(client: TestClient, db_session: Session):
    product = _create_product(db_session)

    client.post("/line_items", json={"product_id": product.id})
    response = client.post("/line_items", json={"product_id": product.id})

    cart = response.json()["data"]["cart"]
    assert len(cart["line_items"]) == 1
    assert cart["line_items"][0]["quantity"] == 2
    assert cart["total_price"] == "20.00"
    assert db_session.query(LineItem).count() == 1


def test_cart_total_across_products(client: TestClient, db_session: Session):
    ten = _create_product(db_session, "Ten", "10.00")
    five = _create_product(db_session, "Five", "5.00")

    client.post("/line_items", json={"product_id": ten.id})
    client.post("/line_items", json={"product_id": ten.id})
    client.post("/line_items", json={"product_id": five.id})

    cart = client.get("/carts/current").json()["data"]
    assert cart["total_price"] == "25.00"
    assert cart["total_items"] == 3


def test_add_unknown_product_returns_not_found(client: TestClient):
    response = client.post("/line_items", json={"product_id": 12345})

    assert response.status_code == 404
    assert response.json()["message"] == "Product not found"


def test_decrement_keeps_zero_quantity_line(client: TestClient, db_session: Session):
    product = _create_product(db_session)
    client.post("/line_items", json={"product_id": product.id})

    response = client.post("/line_items/decrement", json={"product_id": product.id})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["line_item"]["quantity"] == 0
    assert len(data["cart"]["line_items"]) == 1
    assert data["cart"]["total_price"] == "0.00"


def test_decrement_product_not_in_cart_returns_not_found(client: TestClient, db_session: Session):
    product = _create_product(db_session)

    response = client.post("/line_items/decrement", json={"product_id": product.id})

    assert response.status_code == 404
    assert response.json()["success"] is False
    assert response.json()["message"].startswith("Couldn't find LineItem")


def test_delete_line_item_removes_it_from_session_cart(client: TestClient, db_session: Session):
    product = _create_product(db_session)
    line_item_id = client.post("/line_items", json={"product_id": product.id}).json()["data"]["line_item"]["id"]

    response = client.delete(f"/line_items/{line_item_id}")

    assert response.status_code == 200
    assert response.json()["data"]["line_items"] == []
    assert db_session.query(LineItem).count() == 0


def test_delete_line_item_of_another_cart_is_not_found(client: TestClient, db_session: Session):
    product = _create_product(db_session)
    line_item_id = client.post("/line_items", json={"product_id": product.id}).json()["data"]["line_item"]["id"]
    client.cookies.clear()

    response = client.delete(f"/line_items/{line_item_id}")

    assert response.status_code == 404
    assert db_session.query(LineItem).count() == 1


def test_listing_line_items_requires_login(client: TestClient):
    response = client.get("/line_items", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
