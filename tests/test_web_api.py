"""
HTTP API over the cache gateway.
"""

import pytest
from fastapi.testclient import TestClient

from storefront.services.cache_gateway import CacheGateway
from storefront.web.main import create_app


@pytest.fixture
def client(store, clock):
    app = create_app(CacheGateway(store, ttl=300, clock=clock))
    with TestClient(app) as c:
        yield c


class TestApi:
    def test_products(self, client, store):
        response = client.get("/api/products")

        assert response.status_code == 200
        body = response.json()
        assert body[0] == {
            "id": "1",
            "name": "Cámara IP Wifi",
            "description": "Cámara de seguridad",
            "price": 35.5,
            "stock": 4,
            "categoryId": "10",
            "categoryName": "Cámaras",
            "subCategoryName": "Cámaras IP",
            "images": ["https://img/cam-1.jpg", "https://img/cam-2.jpg"],
            "videoUrl": None,
        }

    def test_products_are_cached(self, client, store):
        client.get("/api/products")
        client.get("/api/products")
        assert store.calls["products"] == 1

    def test_categories(self, client):
        body = client.get("/api/categories").json()
        assert body[0]["id"] == "10"
        assert body[0]["name"] == "Cámaras"
        assert body[0]["image"]

    def test_config(self, client):
        assert client.get("/api/config").json() == {"appName": "Safari", "whatsappNumber": "0991234567"}

    def test_store_failure_is_500(self, client, store):
        store.fail = True
        response = client.get("/api/products")
        assert response.status_code == 500
        assert response.text == "connection reset"

    def test_product_detail(self, client):
        response = client.get("/api/products/1")
        assert response.status_code == 200
        assert response.json()["name"] == "Cámara IP Wifi"

    @pytest.mark.parametrize("product_id", ["99", "abc", "99999999999999999999"])
    def test_product_not_found(self, client, product_id):
        response = client.get(f"/api/products/{product_id}")
        assert response.status_code == 404
        assert response.text == "Product not found"

    def test_cors(self, client):
        response = client.get("/api/config", headers={"Origin": "http://localhost:5173"})
        assert response.headers.get("access-control-allow-origin") == "*"
