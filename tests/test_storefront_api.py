"""Tests for the public storefront endpoints.

These tests verify:
- Section listing with filters and facets
- Hidden (unavailable) products and unknown sections
- Product detail and the WhatsApp order link
- Empty listing when the database read fails
"""

from sqlalchemy.exc import OperationalError


class TestShopListing:

    def test_category_filter_end_to_end(self, client, make_product):
        """5 electronics products: 3 laptops, 2 televisions."""
        for i in range(3):
            make_product(title=f"Laptop {i}", category="Laptops")
        for i in range(2):
            make_product(title=f"TV {i}", category="Televisions")

        resp = client.get("/api/sections/electronics/products?category=Laptops")
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["total"] == 3
        assert all(p["category"] == "Laptops" for p in data["products"])
        assert data["facets"]["category"] == ["Laptops", "Televisions"]

    def test_price_range_end_to_end(self, client, make_product):
        for price in (5000, 15000, 25000):
            make_product(price=price)

        resp = client.get("/api/sections/electronics/products?min_price=10000&max_price=20000")
        prices = [p["price"] for p in resp.get_json()["products"]]

        assert prices == [15000]

    def test_no_filters_lists_whole_section(self, client, make_product):
        make_product(title="A")
        make_product(title="B")
        make_product(section="furniture", title="Sofa", category="Sofas")

        data = client.get("/api/sections/electronics/products").get_json()

        assert [p["title"] for p in data["products"]] == ["A", "B"]
        assert data["filters"]["price_range"] == [0.0, 200000.0]

    def test_search_and_brand(self, client, make_product):
        make_product(title="Sony Bravia", brand="Sony", category="Televisions")
        make_product(title="Sony Alpha", brand="Sony", category="Cameras")
        make_product(title="Canon EOS", brand="Canon", category="Cameras")

        data = client.get("/api/sections/electronics/products?search=ALPHA").get_json()
        assert [p["title"] for p in data["products"]] == ["Sony Alpha"]

        data = client.get("/api/sections/electronics/products?brand=Sony&brand=Canon&category=Cameras").get_json()
        assert [p["title"] for p in data["products"]] == ["Sony Alpha", "Canon EOS"]

    def test_unavailable_products_hidden(self, client, make_product):
        make_product(title="Visible")
        make_product(title="Hidden", availability=False)

        data = client.get("/api/sections/electronics/products").get_json()
        assert [p["title"] for p in data["products"]] == ["Visible"]

    def test_unknown_section(self, client):
        resp = client.get("/api/sections/kitchen/products")
        assert resp.status_code == 404
        assert resp.get_json()["ok"] is False

    def test_read_failure_gives_empty_list(self, client, monkeypatch):
        import app as app_module

        class BrokenQuery:
            def filter_by(self, **kwargs):
                raise OperationalError("SELECT", {}, Exception("db down"))

        class BrokenProduct:
            query = BrokenQuery()

        monkeypatch.setattr(app_module, "Product", BrokenProduct)

        resp = client.get("/api/sections/furniture/products")
        assert resp.status_code == 200
        assert resp.get_json()["products"] == []

    def test_categories(self, client):
        data = client.get("/api/sections/electronics/categories").get_json()
        assert "Televisions" in data["categories"]
        assert "OLED" in data["sub_types"]["Televisions"]
        assert data["spec_units"]["Televisions"] == "inches"
        assert data["color_categories"] == ["Mobile Phones", "Refrigerators"]


class TestProductDetailAndOrder:

    def test_detail(self, client, make_product):
        product = make_product(title="Galaxy A55")
        resp = client.get(f"/api/products/{product.id}")
        assert resp.status_code == 200
        assert resp.get_json()["title"] == "Galaxy A55"

    def test_detail_hidden_product(self, client, make_product):
        product = make_product(availability=False)
        assert client.get(f"/api/products/{product.id}").status_code == 404

    def test_order_link(self, client, make_product):
        product = make_product(title="Galaxy A55", price=38999, model_no="SM-A556E")

        resp = client.post(f"/api/products/{product.id}/order", json={
            "name": "Priya", "mobile": "9876543210", "address": "Erode", "quantity": 2,
        })
        data = resp.get_json()

        assert resp.status_code == 200
        assert data["whatsapp_url"].startswith("https://wa.me/911234567890?text=")
        assert "Model: SM-A556E" in data["message"]
        assert data["total"] == 77998

    def test_order_missing_fields(self, client, make_product):
        product = make_product()
        resp = client.post(f"/api/products/{product.id}/order", json={"name": "Priya"})

        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["mobile", "address"]

    def test_order_bad_quantity(self, client, make_product):
        product = make_product()
        resp = client.post(f"/api/products/{product.id}/order", json={
            "name": "Priya", "mobile": "1", "address": "X", "quantity": -1,
        })
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["quantity"]

    def test_order_numeric_fields(self, client, make_product):
        product = make_product()
        resp = client.post(f"/api/products/{product.id}/order", json={
            "name": "Priya", "mobile": 9876543210, "address": "Erode",
        })
        assert resp.status_code == 200
        assert "Mobile: 9876543210" in resp.get_json()["message"]

    def test_order_non_object_body(self, client, make_product):
        product = make_product()
        resp = client.post(f"/api/products/{product.id}/order", json=["Priya", "9876543210"])

        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["name", "mobile", "address"]
