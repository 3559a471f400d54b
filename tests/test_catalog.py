import json

from sqlmodel import select

from app.models.product import Category, Product
from tests.factories import API, make_category, make_product

BURGER_FORM = {
    "name": "Smash Burger",
    "description": "Two thin patties, cheese, pickles",
    "prices": json.dumps({"half": 6.5, "full": 11}),
    "image": "https://images.example.com/smash.jpg",
    "category": "Burgers",
}


# ----- categories -----


def test_categories_listed_by_name_publicly(client, db):
    make_category(db, "Pizza")
    make_category(db, "Burgers")
    make_category(db, "Desserts")

    r = client.get(f"{API}/categories")
    assert r.status_code == 200
    assert [c["name"] for c in r.json()] == ["Burgers", "Desserts", "Pizza"]


def test_category_create_requires_admin(client, user_client):
    r = client.post(f"{API}/categories", data={"name": "Wraps"})
    assert r.json() == {"success": False, "message": "Admin access required"}


def test_category_create_without_cookie(client):
    r = client.post(f"{API}/categories", data={"name": "Wraps"})
    assert r.json() == {"success": False, "message": "Unauthorized"}


def test_category_create_with_bad_cookie(client):
    client.cookies.set("_auth_token", "tampered")
    r = client.post(f"{API}/categories", data={"name": "Wraps"})
    assert r.json() == {"success": False, "message": "Invalid token"}


def test_category_crud(admin_client, db):
    r = admin_client.post(f"{API}/categories", data={"name": "Wraps", "description": "Rolled up"})
    assert r.json()["success"] is True

    dup = admin_client.post(f"{API}/categories", data={"name": "Wraps"})
    assert dup.json() == {"success": False, "message": "Category name already exists"}

    category = db.exec(select(Category).where(Category.name == "Wraps")).one()

    r = admin_client.get(f"{API}/categories/{category.id}")
    assert r.status_code == 200
    assert r.json()["description"] == "Rolled up"

    r = admin_client.put(f"{API}/categories/{category.id}", data={"name": "Rolls"})
    assert r.json()["success"] is True

    r = admin_client.delete(f"{API}/categories/{category.id}")
    assert r.json()["success"] is True
    db.expire_all()
    assert db.exec(select(Category)).all() == []


def test_category_rename_to_existing_name(admin_client, db):
    make_category(db, "Pizza")
    burgers = make_category(db, "Burgers")
    r = admin_client.put(f"{API}/categories/{burgers.id}", data={"name": "Pizza"})
    assert r.json() == {"success": False, "message": "Category name already exists"}


def test_category_with_products_cannot_be_deleted(admin_client, db):
    category = make_category(db)
    make_product(db, category)

    r = admin_client.delete(f"{API}/categories/{category.id}")
    assert r.json() == {
        "success": False,
        "message": "Cannot delete category with associated products",
    }


def test_category_toggle(admin_client, db):
    category = make_category(db)

    r = admin_client.post(f"{API}/categories/{category.id}/toggle")
    assert r.json() == {"success": True, "message": None, "is_active": False}

    r = admin_client.post(f"{API}/categories/{category.id}/toggle")
    assert r.json()["is_active"] is True


# ----- products -----


def test_products_listed_publicly(client, db):
    category = make_category(db)
    make_product(db, category, name="Classic Burger")
    make_product(db, category, name="Veggie Burger", is_available=False)

    r = client.get(f"{API}/products")
    assert r.status_code == 200
    assert {p["name"] for p in r.json()} == {"Classic Burger", "Veggie Burger"}

    r = client.get(f"{API}/products", params={"only_available": True})
    assert [p["name"] for p in r.json()] == ["Classic Burger"]


def test_product_create(admin_client, db):
    category = make_category(db)

    r = admin_client.post(f"{API}/products", data=BURGER_FORM)
    assert r.json() == {"success": True, "message": "Product created successfully"}

    product = db.exec(select(Product)).one()
    assert product.category == "Burgers"
    assert product.category_id == category.id
    assert product.prices == {"half": 6.5, "full": 11}
    assert product.is_available is True


def test_product_create_needs_existing_category(admin_client, db):
    r = admin_client.post(f"{API}/products", data=BURGER_FORM)
    assert r.json() == {"success": False, "message": "Category 'Burgers' not found"}
    assert db.exec(select(Product)).all() == []


def test_product_create_validates_fields(admin_client, db):
    make_category(db)

    r = admin_client.post(f"{API}/products", data={**BURGER_FORM, "description": "  "})
    assert r.json() == {"success": False, "message": "Description is required"}

    r = admin_client.post(f"{API}/products", data={**BURGER_FORM, "prices": "{oops"})
    assert r.json() == {"success": False, "message": "Prices must be valid JSON"}

    r = admin_client.post(f"{API}/products", data={**BURGER_FORM, "prices": json.dumps({"half": 3})})
    assert r.json()["success"] is False


def test_product_create_requires_admin(user_client, db):
    make_category(db)
    r = user_client.post(f"{API}/products", data=BURGER_FORM)
    assert r.json() == {"success": False, "message": "Admin access required"}


def test_product_update_moves_category(admin_client, db):
    burgers = make_category(db, "Burgers")
    mains = make_category(db, "Mains")
    product = make_product(db, burgers)

    r = admin_client.put(
        f"{API}/products/{product.id}",
        data={**BURGER_FORM, "name": "Steak Burger", "category": "Mains"},
    )
    assert r.json() == {"success": True, "message": "Product updated successfully"}

    db.expire_all()
    updated = db.get(Product, product.id)
    assert updated.name == "Steak Burger"
    assert updated.category == "Mains"
    assert updated.category_id == mains.id


def test_product_get_requires_admin(client, user_client, db):
    product = make_product(db, make_category(db))
    assert user_client.get(f"{API}/products/{product.id}").status_code == 403


def test_product_get_for_admin(admin_client, db):
    product = make_product(db, make_category(db))
    r = admin_client.get(f"{API}/products/{product.id}")
    assert r.status_code == 200
    assert r.json()["prices"] == {"quarter": None, "half": 7.5, "full": 12.99}


def test_product_delete(admin_client, db):
    product = make_product(db, make_category(db))

    r = admin_client.delete(f"{API}/products/{product.id}")
    assert r.json()["success"] is True

    db.expire_all()
    assert db.exec(select(Product)).all() == []


def test_toggle_availability_twice_restores_state(admin_client, db):
    product = make_product(db, make_category(db))
    before = product.is_available

    first = admin_client.post(f"{API}/products/{product.id}/toggle-availability")
    assert first.json()["is_available"] is (not before)

    second = admin_client.post(f"{API}/products/{product.id}/toggle-availability")
    assert second.json()["is_available"] is before

    db.expire_all()
    assert db.get(Product, product.id).is_available is before


def test_toggle_unknown_product(admin_client):
    r = admin_client.post(f"{API}/products/00000000-0000-0000-0000-000000000000/toggle-availability")
    assert r.json() == {"success": False, "message": "Product not found", "is_available": None}


def test_product_image_upload(admin_client, db, monkeypatch):
    from app.services import product_service

    uploads = []

    def fake_upload(path, file_bytes, content_type):
        uploads.append((path, file_bytes, content_type))
        return f"https://proj.supabase.co/storage/v1/object/public/assets/{path}"

    monkeypatch.setattr(product_service, "upload_to_storage", fake_upload)

    product = make_product(db, make_category(db))
    r = admin_client.post(
        f"{API}/products/{product.id}/image",
        files={"file": ("dish.png", b"\x89PNG...", "image/png")},
    )
    body = r.json()
    assert body["success"] is True
    assert body["image"].endswith(f"products/{product.id}/image.png")
    assert uploads == [(f"products/{product.id}/image.png", b"\x89PNG...", "image/png")]


def test_product_image_rejects_unsupported_type(admin_client, db):
    product = make_product(db, make_category(db))
    r = admin_client.post(
        f"{API}/products/{product.id}/image",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert r.json() == {
        "success": False,
        "message": "Unsupported image type. Allowed: JPEG, PNG, WEBP.",
        "image": None,
    }


def test_category_rename_carries_over_to_products(admin_client, db):
    burgers = make_category(db, "Burgers")
    product = make_product(db, burgers)

    r = admin_client.put(f"{API}/categories/{burgers.id}", data={"name": "Grill"})
    assert r.json()["success"] is True

    db.expire_all()
    assert db.get(Product, product.id).category == "Grill"

    menu = admin_client.get("/menu", params={"category": "Grill"}).json()
    assert [p["name"] for p in menu["items"]] == ["Classic Burger"]

    r = admin_client.put(
        f"{API}/products/{product.id}",
        data={**BURGER_FORM, "category": "Grill"},
    )
    assert r.json()["success"] is True


def _broken_storage(url):
    raise RuntimeError("Missing SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY in .env")


def test_product_delete_survives_storage_failure(admin_client, db, monkeypatch):
    from app.services import product_service

    monkeypatch.setattr(product_service, "delete_public_url", _broken_storage)
    product = make_product(
        db,
        make_category(db),
        image="https://proj.supabase.co/storage/v1/object/public/assets/products/p/image.png",
    )

    r = admin_client.delete(f"{API}/products/{product.id}")
    assert r.json() == {"success": True, "message": None}

    db.expire_all()
    assert db.exec(select(Product)).all() == []


def test_image_replacement_saved_when_old_image_cleanup_fails(admin_client, db, monkeypatch):
    from app.services import product_service

    monkeypatch.setattr(product_service, "delete_public_url", _broken_storage)
    monkeypatch.setattr(
        product_service,
        "upload_to_storage",
        lambda path, file_bytes, content_type: f"https://cdn.example.com/{path}",
    )
    product = make_product(db, make_category(db))

    r = admin_client.post(
        f"{API}/products/{product.id}/image",
        files={"file": ("dish.jpg", b"\xff\xd8\xff", "image/jpeg")},
    )
    assert r.json()["success"] is True

    db.expire_all()
    assert db.get(Product, product.id).image == f"https://cdn.example.com/products/{product.id}/image.jpg"


def test_product_image_rejects_oversized_file(admin_client, db, monkeypatch):
    from app.services import product_service

    uploads = []
    monkeypatch.setattr(
        product_service,
        "upload_to_storage",
        lambda *args: uploads.append(args),
    )
    product = make_product(db, make_category(db))

    r = admin_client.post(
        f"{API}/products/{product.id}/image",
        files={"file": ("big.png", b"\0" * (product_service.MAX_IMAGE_BYTES + 10), "image/png")},
    )
    assert r.json() == {"success": False, "message": "Image too large (max 5MB).", "image": None}
    assert uploads == []
