from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from storefront.core.security import hash_password
from storefront.models.user import User


def _create_user(db: Session, name: str = "dave", password: str = "secret") -> User:
    user = User(name=name, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _login(client: TestClient, name: str = "dave", password: str = "secret"):
    return client.post(
        "/login",
        data={"name": name, "password": password},
        follow_redirects=False,
    )


def test_login_page_is_public(client: TestClient):
    response = client.get("/login")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"]["logged_in_as"] is None


def test_login_success_redirects_to_default_landing_page(client: TestClient, db_session: Session):
    _create_user(db_session)

    response = _login(client)

    assert response.status_code == 303
    assert response.headers["location"] == "/admin"

    admin_response = client.get("/admin")
    assert admin_response.status_code == 200
    assert admin_response.json()["data"]["user"] == "dave"


def test_login_accepts_json_body(client: TestClient, db_session: Session):
    _create_user(db_session)

    response = client.post(
        "/login",
        json={"name": "dave", "password": "secret"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/admin"
    assert client.get("/login").json()["data"]["logged_in_as"] == "dave"


def test_login_redirects_back_to_originally_requested_page(client: TestClient, db_session: Session):
    _create_user(db_session)

    denied = client.get("/products?sort=name", follow_redirects=False)
    assert denied.status_code == 303
    assert denied.headers["location"] == "/login"

    response = _login(client)

    assert response.status_code == 303
    assert response.headers["location"] == "/products?sort=name"

    # The stored destination is consumed by the first login
    _login(client)
    assert _login(client).headers["location"] == "/admin"


def test_login_with_wrong_password_and_unknown_user_look_the_same(client: TestClient, db_session: Session):
    _create_user(db_session)

    wrong_password = _login(client, password="not-the-password")
    wrong_password_page = client.get("/login").json()

    unknown_user = _login(client, name="nobody")
    unknown_user_page = client.get("/login").json()

    assert wrong_password.status_code == unknown_user.status_code == 303
    assert wrong_password.headers["location"] == unknown_user.headers["location"] == "/login"
    assert wrong_password_page["data"]["flash"] == {"alert": "Invalid user/password combination"}
    assert unknown_user_page["data"]["flash"] == wrong_password_page["data"]["flash"]
    assert unknown_user_page["data"]["logged_in_as"] is None


def test_login_with_missing_fields_fails_like_bad_credentials(client: TestClient, db_session: Session):
    _create_user(db_session)

    response = client.post("/login", json={"name": "dave"}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"


def test_logout_clears_user_and_redirects_to_store(client: TestClient, db_session: Session):
    _create_user(db_session)
    _login(client)

    response = client.delete("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"

    store = client.get("/").json()
    assert store["data"]["flash"] == {"notice": "Logged out"}

    denied = client.get("/admin", follow_redirects=False)
    assert denied.status_code == 303
    assert denied.headers["location"] == "/login"


def test_logout_when_anonymous_still_redirects(client: TestClient):
    first = client.delete("/logout", follow_redirects=False)
    second = client.delete("/logout", follow_redirects=False)

    assert first.status_code == second.status_code == 303
    assert first.headers["location"] == second.headers["location"] == "/"


def test_logout_keeps_the_session_cart(client: TestClient, db_session: Session):
    _create_user(db_session)
    cart_id = client.get("/carts/current").json()["data"]["id"]

    _login(client)
    client.delete("/logout", follow_redirects=False)

    assert client.get("/carts/current").json()["data"]["id"] == cart_id


def test_protected_page_redirects_to_login_with_notice(client: TestClient):
    response = client.get("/orders", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert client.get("/login").json()["data"]["flash"] == {"notice": "Please log in"}


def test_protected_write_does_not_store_return_location(client: TestClient, db_session: Session):
    _create_user(db_session)

    denied = client.post("/products", json={"name": "x", "price": "1.00"}, follow_redirects=False)
    assert denied.status_code == 303

    assert _login(client).headers["location"] == "/admin"


def test_session_for_deleted_user_is_treated_as_anonymous(client: TestClient, db_session: Session):
    user = _create_user(db_session)
    _login(client)

    db_session.delete(user)
    db_session.commit()

    response = client.get("/admin", follow_redirects=False)
    assert response.status_code == 303
    assert response.headers["location"] == "/login"
