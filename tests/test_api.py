# =============================================================================
# tests/test_api.py - End-to-End API Tests
# =============================================================================
# Drives the full app through TestClient with the file record store and the
# local image store in tmp_path. The lifespan runs, so the default admin
# exists in every test.
# =============================================================================

import pytest
from fastapi.testclient import TestClient

from app.main import create_app
from core.stores import SqliteRecordStore

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64

PEARL_BAG = {"name": "Pearl Bag", "price": "1299", "category": "bags"}


def create_product(client, data=None, files=None):
    response = client.post("/api/products", data=data or PEARL_BAG, files=files)
    assert response.status_code == 200, response.text
    return response.json()["product"]


# =============================================================================
# Products
# =============================================================================

class TestProductEndpoints:
    """Test /api/products."""

    def test_create_then_get_applies_defaults(self, client):
        """Test that inStock defaults true and featured false."""
        response = client.post("/api/products", data=PEARL_BAG)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True

        product = client.get(f"/api/products/{body['product']['id']}").json()
        assert product["name"] == "Pearl Bag"
        assert product["price"] == 1299
        assert product["category"] == "bags"
        assert product["inStock"] is True
        assert product["featured"] is False
        assert product["image"] == ""
        assert "createdAt" in product and "updatedAt" in product

    def test_list_newest_first(self, client):
        create_product(client, {**PEARL_BAG, "name": "First"})
        create_product(client, {**PEARL_BAG, "name": "Second"})

        names = [product["name"] for product in client.get("/api/products").json()]

        assert names == ["Second", "First"]

    def test_list_filters(self, client):
        create_product(client, {**PEARL_BAG, "featured": "true"})
        create_product(client, {"name": "Necklace", "price": "599", "category": "jewelry"})

        jewelry = client.get("/api/products", params={"category": "jewelry"}).json()
        featured = client.get("/api/products", params={"featured": "true"}).json()

        assert [p["name"] for p in jewelry] == ["Necklace"]
        assert [p["name"] for p in featured] == ["Pearl Bag"]

    def test_get_missing_is_404(self, client):
        response = client.get("/api/products/999")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["code"] == "NOT_FOUND"
        assert body["error"] == "Product not found"

    def test_missing_required_field_is_400(self, client):
        response = client.post("/api/products", data={"name": "Pearl Bag", "price": "1299"})

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_bad_price_is_400(self, client):
        response = client.post("/api/products", data={**PEARL_BAG, "price": "-5"})

        assert response.status_code == 400

    def test_upload_image_and_serve_it(self, client):
        product = create_product(client, files={"image": ("bag.png", PNG_BYTES, "image/png")})

        assert product["image"].startswith("/uploads/")
        served = client.get(product["image"])
        assert served.status_code == 200
        assert served.content == PNG_BYTES

    def test_non_image_upload_rejected(self, client, settings):
        response = client.post(
            "/api/products",
            data=PEARL_BAG,
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 415
        assert response.json()["error"] == "Only image files are allowed!"
        assert client.get("/api/products").json() == []
        assert not any(settings.uploads_path.iterdir())

    def test_oversized_upload_rejected(self, settings):
        """Test that a file over the limit is refused with 413 and nothing is stored."""
        app = create_app(settings.model_copy(update={"MAX_IMAGE_SIZE_MB": 1}))
        oversized = PNG_BYTES + b"\x00" * (1024 * 1024)

        with TestClient(app) as client:
            response = client.post(
                "/api/products",
                data=PEARL_BAG,
                files={"image": ("huge.png", oversized, "image/png")},
            )

            assert response.status_code == 413
            assert "Image too large" in response.json()["error"]
            assert client.get("/api/products").json() == []
        assert not any(settings.uploads_path.iterdir())

    def test_oversized_replacement_keeps_product(self, settings):
        app = create_app(settings.model_copy(update={"MAX_IMAGE_SIZE_MB": 1}))

        with TestClient(app) as client:
            product = create_product(client, files={"image": ("bag.png", PNG_BYTES, "image/png")})

            response = client.put(
                f"/api/products/{product['id']}",
                files={"image": ("huge.png", b"\x00" * (1024 * 1024 + 1), "image/png")},
            )

            assert response.status_code == 413
            assert client.get(f"/api/products/{product['id']}").json()["image"] == product["image"]
        assert len(list(settings.uploads_path.iterdir())) == 1

    def test_image_url(self, client):
        product = create_product(client, {**PEARL_BAG, "imageUrl": "https://cdn.example.com/bag.jpg"})

        assert product["image"] == "https://cdn.example.com/bag.jpg"

    def test_update_partial(self, client):
        product = create_product(client, {**PEARL_BAG, "featured": "true"})

        response = client.put(f"/api/products/{product['id']}", data={"price": "999", "inStock": "false"})

        assert response.status_code == 200
        updated = response.json()["product"]
        assert updated["price"] == 999
        assert updated["inStock"] is False
        assert updated["featured"] is True
        assert updated["name"] == "Pearl Bag"

    def test_update_replaces_image(self, client, settings):
        product = create_product(client, files={"image": ("old.png", PNG_BYTES, "image/png")})

        updated = client.put(
            f"/api/products/{product['id']}",
            files={"image": ("new.png", PNG_BYTES, "image/png")},
        ).json()["product"]

        assert updated["image"] != product["image"]
        assert client.get(product["image"]).status_code == 404
        assert len(list(settings.uploads_path.iterdir())) == 1

    def test_update_missing_is_404(self, client):
        assert client.put("/api/products/999", data={"price": "1"}).status_code == 404

    def test_delete(self, client, settings):
        product = create_product(client, files={"image": ("bag.png", PNG_BYTES, "image/png")})

        response = client.delete(f"/api/products/{product['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted successfully"}
        assert client.get(f"/api/products/{product['id']}").status_code == 404
        assert not any(settings.uploads_path.iterdir())

    def test_delete_missing_is_404(self, client):
        assert client.delete("/api/products/999").status_code == 404


# =============================================================================
# Admin
# =============================================================================

class TestAdminEndpoints:
    """Test /api/admin."""

    def test_login(self, client):
        response = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Login successful"}

    def test_login_wrong_password(self, client):
        response = client.post("/api/admin/login", json={"username": "admin", "password": "nope"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_change_password(self, client):
        response = client.post(
            "/api/admin/change-password",
            json={"currentPassword": "admin123", "newPassword": "beads-2024"},
        )

        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"
        assert client.post("/api/admin/login", json={"username": "admin", "password": "beads-2024"}).status_code == 200
        assert client.post("/api/admin/login", json={"username": "admin", "password": "admin123"}).status_code == 401

    def test_change_password_wrong_current(self, client):
        response = client.post(
            "/api/admin/change-password",
            json={"currentPassword": "nope", "newPassword": "beads-2024"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Current password is incorrect"

    def test_change_password_too_short(self, client):
        response = client.post(
            "/api/admin/change-password",
            json={"currentPassword": "admin123", "newPassword": "abc"},
        )

        assert response.status_code == 400


# =============================================================================
# Messages
# =============================================================================

class TestMessageEndpoints:
    """Test /api/messages."""

    def submit(self, client, **overrides):
        body = {"name": "Maria", "email": "maria@example.com", "message": "Do you ship to Cebu?"}
        body.update(overrides)
        return client.post("/api/messages", json=body)

    def test_submit_and_list(self, client):
        response = self.submit(client)

        assert response.status_code == 201
        assert response.json() == {"success": True, "message": "Message sent successfully"}

        messages = client.get("/api/messages").json()
        assert len(messages) == 1
        assert messages[0]["status"] == "unread"
        assert messages[0]["subject"] == ""
        assert "createdAt" in messages[0]

    def test_missing_field_is_400(self, client):
        response = client.post("/api/messages", json={"name": "Maria", "email": "maria@example.com"})

        assert response.status_code == 400
        assert response.json()["error"] == "All fields are required"

    def test_mark_read(self, client):
        self.submit(client)
        message_id = client.get("/api/messages").json()[0]["id"]

        response = client.patch(f"/api/messages/{message_id}")

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "read"
        assert client.get("/api/messages").json()[0]["status"] == "read"

    def test_mark_read_missing_is_404(self, client):
        assert client.patch("/api/messages/999").status_code == 404

    def test_delete(self, client):
        self.submit(client)
        message_id = client.get("/api/messages").json()[0]["id"]

        response = client.delete(f"/api/messages/{message_id}")

        assert response.json() == {"success": True}
        assert client.get("/api/messages").json() == []


# =============================================================================
# Subscribers
# =============================================================================

class TestSubscriberEndpoints:
    """Test /api/subscribers."""

    def test_subscribe(self, client):
        response = client.post("/api/subscribers", json={"email": "a@b.com"})

        assert response.status_code == 201
        assert response.json() == {"success": True, "message": "Subscribed successfully"}
        subscribers = client.get("/api/subscribers").json()
        assert subscribers[0]["email"] == "a@b.com"
        assert subscribers[0]["status"] == "active"
        assert "subscribedAt" in subscribers[0]

    def test_duplicate_subscribe(self, client):
        client.post("/api/subscribers", json={"email": "a@b.com"})

        response = client.post("/api/subscribers", json={"email": "A@B.com "})

        assert response.status_code == 409
        assert "already subscribed" in response.json()["error"]
        assert len(client.get("/api/subscribers").json()) == 1

    def test_missing_email_is_400(self, client):
        response = client.post("/api/subscribers", json={})

        assert response.status_code == 400
        assert response.json()["error"] == "Email is required"

    def test_delete(self, client):
        client.post("/api/subscribers", json={"email": "a@b.com"})
        subscriber_id = client.get("/api/subscribers").json()[0]["id"]

        assert client.delete(f"/api/subscribers/{subscriber_id}").status_code == 200
        assert client.delete(f"/api/subscribers/{subscriber_id}").status_code == 404


# =============================================================================
# Health and App Wiring
# =============================================================================

class TestHealthEndpoints:
    """Test /api/health."""

    def test_health(self, client):
        body = client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["environment"] == "development"

    def test_live(self, client):
        assert client.get("/api/health/live").json()["status"] == "alive"

    def test_ready(self, client):
        body = client.get("/api/health/ready").json()

        assert body["status"] == "ready"
        assert body["backends"] == {"database": "file", "storage": "local"}

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/api/health"


class TestAppWiring:
    """Test startup behavior and injected stores."""

    def test_seeds_samples_when_enabled(self, settings):
        app = create_app(settings.model_copy(update={"SEED_SAMPLE_PRODUCTS": True}))

        with TestClient(app) as client:
            names = {product["name"] for product in client.get("/api/products").json()}

        assert names == {"Pearl White Beaded Bag", "Sky Blue Beaded Bag", "Classic Beaded Necklace"}

    def test_injected_sqlite_store(self, settings, tmp_path):
        store = SqliteRecordStore(tmp_path / "api.db")
        app = create_app(settings, record_store=store)

        with TestClient(app) as client:
            create_product(client)
            assert client.post("/api/admin/login", json={"username": "admin", "password": "admin123"}).status_code == 200

        assert store.products.count() == 1

    @pytest.mark.parametrize("path", ["/api/products/abc", "/api/messages/abc"])
    def test_bad_path_param_is_422(self, client, path):
        method = client.get if path.startswith("/api/products") else client.patch

        response = method(path)

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
