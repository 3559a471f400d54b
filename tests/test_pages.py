import pytest

from app.core.route_gate import is_protected, is_skipped
from app.services.menu_service import MenuService
from tests.factories import API, make_category, make_product, make_user


@pytest.mark.parametrize(
    "path",
    ["/api/v1/products", "/healthz", "/docs", "/openapi.json", "/favicon.ico", "/logo.svg", "/img/hero.PNG"],
)
def test_skipped_paths(path):
    assert is_skipped(path)


@pytest.mark.parametrize("path", ["/", "/menu", "/cart", "/menu/burgers"])
def test_protected_paths(path):
    assert is_protected(path)


def test_login_page_is_not_protected():
    assert not is_protected("/login")
    assert not is_protected("/cartoons")


# ----- route gate -----


@pytest.mark.parametrize("path", ["/menu", "/cart", "/"])
def test_guest_is_sent_to_login_with_callback(client, path):
    r = client.get(path, follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"].startswith("/login?callbackUrl=")
    assert r.headers["location"].endswith(path.replace("/", "%2F"))


def test_guest_sees_auth_pages(client):
    r = client.get("/login", params={"callbackUrl": "/menu"}, follow_redirects=False)
    assert r.status_code == 200
    assert r.json()["callback_url"] == "/menu"
    assert r.json()["action"] == f"{API}/auth/login"


def test_signed_in_user_is_bounced_from_auth_pages(user_client):
    for path in ("/login", "/signup", "/verify-otp", "/forgot-password", "/reset-password"):
        r = user_client.get(path, follow_redirects=False)
        assert r.status_code == 307
        assert r.headers["location"] == "/"


def test_garbage_cookie_counts_as_guest(client):
    client.cookies.set("_auth_token", "garbage")
    r = client.get("/menu", follow_redirects=False)
    assert r.status_code == 307
    assert client.get("/login", follow_redirects=False).status_code == 200


def test_api_and_health_are_not_gated(client):
    assert client.get("/healthz").json() == {"status": "ok", "service": "yellowchilli-backend"}
    assert client.get(f"{API}/products", follow_redirects=False).status_code == 200


def test_reset_page_without_token(client):
    body = client.get("/reset-password").json()
    assert body["error"] == "Invalid or missing reset token"

    body = client.get("/reset-password", params={"token": "abc"}).json()
    assert body["token"] == "abc"
    assert body["error"] is None


# ----- pages -----


def test_home_features_available_products(user_client, db):
    category = make_category(db)
    make_product(db, category, name="Classic Burger")
    make_product(db, category, name="Hidden Burger", is_available=False)

    body = user_client.get("/").json()
    assert body["user"]["email"] == "alice@example.com"
    assert [p["name"] for p in body["featured"]] == ["Classic Burger"]


def test_menu_search_and_category_filter(user_client, db):
    burgers = make_category(db, "Burgers")
    pizza = make_category(db, "Pizza")
    make_category(db, "Retired", is_active=False)
    make_product(db, burgers, name="Classic Burger", description="Beef patty")
    make_product(db, burgers, name="Veggie Burger", description="Chickpea patty")
    make_product(db, pizza, name="Margherita", description="Tomato and basil")

    body = user_client.get("/menu").json()
    assert [c["name"] for c in body["categories"]] == ["Burgers", "Pizza"]
    assert len(body["items"]) == 3

    body = user_client.get("/menu", params={"q": "PATTY"}).json()
    assert {p["name"] for p in body["items"]} == {"Classic Burger", "Veggie Burger"}

    body = user_client.get("/menu", params={"q": "basil", "category": "Burgers"}).json()
    assert body["items"] == []
    assert body["query"] == "basil"
    assert body["selected_category"] == "Burgers"


def test_filter_items_matches_name_or_description(db):
    category = make_category(db)
    tikka = make_product(db, category, name="Paneer Tikka", description="Smoky")
    make_product(db, category, name="Fries", description="Salted")

    products = [tikka]
    assert MenuService.filter_items(products, query="smoky") == [tikka]
    assert MenuService.filter_items(products, query="  ") == [tikka]
    assert MenuService.filter_items(products, category="Pizza") == []


def test_cart_page_shows_cookie_cart(user_client, db):
    product = make_product(db, make_category(db))
    user_client.post(f"{API}/cart/items", data={"product_id": str(product.id)})

    body = user_client.get("/cart").json()
    assert body["cart"]["total_items"] == 1
    assert body["cart"]["grand_total"] > body["cart"]["subtotal"]


def test_admin_dashboard_requires_admin(user_client):
    assert user_client.get("/admin").status_code == 403


def test_admin_dashboard_counts(admin_client, db):
    category = make_category(db)
    make_product(db, category, name="Classic Burger")
    make_product(db, category, name="Veggie Burger", is_available=False)
    make_user(db, email="cust@example.com", phone="2223334444")
    make_user(db, email="pending@example.com", phone="3334445555", active=False)

    stats = admin_client.get("/admin").json()["stats"]
    assert stats == {
        "total_products": 2,
        "available_products": 1,
        "total_categories": 1,
        "total_customers": 1,
    }
