"""
Component tests for the catalog endpoints: listing, title search and bulk load.
"""
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from shop_service.db.functions import get_all_items
from tests.factories import make_item


class TestListItems:

    def test_empty_catalog_returns_empty_list(self, test_client: TestClient):
        response = test_client.get("/items")

        assert response.status_code == 200
        assert response.json() == []

    def test_lists_items_in_insertion_order(self, seeded_client: TestClient):
        response = seeded_client.get("/items")

        assert response.status_code == 200
        assert [item["title"] for item in response.json()] == ["Running Shoe", "Hat", "Wool Sock"]

    def test_defaults_are_applied(self, seeded_client: TestClient):
        shoe = seeded_client.get("/items").json()[0]

        assert shoe["currency"] == "USD"
        assert shoe["rating"] == 0
        assert shoe["reviews"] == []
        assert shoe["suggestedProducts"] == []
        assert shoe["discount"] is None
        assert shoe["createdAt"] is not None


class TestSearchItems:

    def test_search_is_case_insensitive_substring(self, seeded_client: TestClient):
        for query in ("shoe", "SHOE", "Shoe", "unning s"):
            response = seeded_client.get("/items/search", params={"name": query})

            assert response.status_code == 200
            assert [item["title"] for item in response.json()] == ["Running Shoe"]

    def test_no_match_returns_404(self, seeded_client: TestClient):
        response = seeded_client.get("/items/search", params={"name": "umbrella"})

        assert response.status_code == 404
        assert response.json() == {"error": "No data found"}

    def test_wildcard_characters_match_literally(self, seeded_client: TestClient):
        response = seeded_client.get("/items/search", params={"name": "%"})

        assert response.status_code == 404

    def test_empty_query_matches_everything(self, seeded_client: TestClient):
        response = seeded_client.get("/items/search")

        assert response.status_code == 200
        assert len(response.json()) == 3


class TestAddDummyItems:

    def test_nested_fields_are_stored_in_order(self, test_client: TestClient):
        item = make_item(
            "i9",
            "Trail Shoe",
            rating=4.5,
            reviews=[
                {"user": "ann", "comment": "great", "rating": 5},
                {"user": "bob", "comment": "ok", "rating": 3},
            ],
            discount={"percentage": 10, "priceAfterDiscount": 53.99},
            suggestedProducts=[
                {"id": "i1", "title": "Running Shoe", "price": 59.99, "image": "https://img.example.com/i1.jpg"},
            ],
            images=["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"],
        )

        response = test_client.post("/add-dummy-items", json=[item])

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Items added successfully"
        stored = body["data"][0]
        assert [r["user"] for r in stored["reviews"]] == ["ann", "bob"]
        assert stored["discount"] == {"percentage": 10, "priceAfterDiscount": 53.99}
        assert stored["suggestedProducts"][0]["id"] == "i1"
        assert stored["images"] == ["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"]

        listed = test_client.get("/items").json()[0]
        assert listed["reviews"] == stored["reviews"]
        assert listed["images"] == stored["images"]

    def test_body_must_be_non_empty_array(self, test_client: TestClient):
        for body in ([], {"id": "i1"}, "items"):
            response = test_client.post("/add-dummy-items", json=body)

            assert response.status_code == 400
            assert response.json() == {"error": "Send an array of items"}

    def test_invalid_item_rejects_whole_batch(self, test_client: TestClient, run_db):
        """One item missing images means nothing from the batch is inserted."""
        broken = make_item("i2", "Hat")
        del broken["images"]

        response = test_client.post("/add-dummy-items", json=[make_item("i1"), broken])

        assert response.status_code == 400
        assert "images" in response.json()["error"]
        assert run_db(get_all_items) == []

    def test_empty_images_list_is_invalid(self, test_client: TestClient):
        response = test_client.post("/add-dummy-items", json=[make_item("i1", images=[])])

        assert response.status_code == 400

    def test_duplicate_id_in_batch_rejects_whole_batch(self, test_client: TestClient, run_db):
        response = test_client.post("/add-dummy-items", json=[make_item("i1"), make_item("i1", "Hat")])

        assert response.status_code == 400
        assert run_db(get_all_items) == []

    def test_id_already_in_catalog_rejects_whole_batch(self, seeded_client: TestClient):
        response = seeded_client.post("/add-dummy-items", json=[make_item("i10", "Cap"), make_item("i1")])

        assert response.status_code == 400
        assert len(seeded_client.get("/items").json()) == 3


class TestStoreFailures:

    def test_store_failure_is_reported_without_details(self, test_client: TestClient, monkeypatch):
        async def broken(db, *args):
            raise OperationalError("SELECT 1", {}, Exception("disk I/O error on /var/db"))

        monkeypatch.setattr("shop_service.main.get_all_items", broken)
        monkeypatch.setattr("shop_service.main.search_items_by_title", broken)

        for path in ("/items", "/items/search?name=shoe"):
            response = test_client.get(path)

            assert response.status_code == 500
            assert response.json() == {"error": "Server error"}
