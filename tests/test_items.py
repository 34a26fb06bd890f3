"""
アイテムエンドポイントのテスト
"""

import pytest

from entertainment_hub.services import category_counter


@pytest.fixture
def movies(make_category):
    return make_category("Movies")


@pytest.fixture
def games(make_category):
    return make_category("Games")


class TestCreateItem:
    """アイテム作成テスト"""

    def test_create_minimal(self, client, auth_headers, movies):
        """category のみで作成できる"""
        response = client.post(
            "/api/items", json={"category": movies["id"], "title": "Inception"}, headers=auth_headers
        )
        assert response.status_code == 201
        item = response.json()["data"]["item"]
        assert item["slug"] == "inception"
        assert item["status"] == "draft"
        assert item["featured"] is False
        assert item["viewCount"] == 0
        assert item["category"] == {"id": movies["id"], "name": "Movies", "slug": "movies"}
        assert item["createdBy"]["username"] == "superadmin"
        assert item["tags"] == []
        assert item["metadata"] == {}

    def test_create_full_payload(self, make_item, movies):
        item = make_item(
            movies["id"],
            title="The Witcher 3",
            releaseDate="2015-05-19T00:00:00",
            platforms=["PC", "PS5"],
            keyFeatures=["Open world"],
            ratings={"story": 5, "graphics": 4.5},
            rating=4.8,
            characters=[{"name": "Geralt", "description": "Witcher"}],
            soundtrackLinks=["https://example.com/ost"],
            tags=["  RPG ", "Fantasy"],
            metadata={"director": "Konrad Tomaszkiewicz"},
            featured=True,
        )
        assert item["slug"] == "the-witcher-3"
        assert item["platforms"] == ["PC", "PS5"]
        assert item["keyFeatures"] == ["Open world"]
        assert item["ratings"]["story"] == 5
        assert item["rating"] == 4.8
        assert item["characters"][0]["name"] == "Geralt"
        assert item["tags"] == ["rpg", "fantasy"]
        assert item["metadata"] == {"director": "Konrad Tomaszkiewicz"}
        assert item["featured"] is True

    def test_nonexistent_category(self, client, auth_headers, movies):
        """存在しないカテゴリでは作成されない"""
        response = client.post(
            "/api/items",
            json={"category": "missing-category", "title": "Ghost"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Category not found"

        listing = client.get("/api/items").json()["data"]
        assert listing["pagination"]["total"] == 0

    def test_missing_category(self, client, auth_headers):
        response = client.post("/api/items", json={"title": "Orphan"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "category"

    def test_same_title_gets_suffix(self, make_item, movies):
        assert make_item(movies["id"], title="Dune")["slug"] == "dune"
        assert make_item(movies["id"], title="Dune")["slug"] == "dune-1"

    def test_title_required_for_slug(self, client, auth_headers, movies):
        response = client.post("/api/items", json={"category": movies["id"]}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Title is required to generate slug"

    @pytest.mark.parametrize(
        "payload, field",
        [
            ({"rating": 6}, "rating"),
            ({"ratings": {"story": 0}}, "ratings.story"),
            ({"soundtrackLinks": ["not-a-url"]}, "soundtrackLinks"),
            ({"tags": ["x" * 31]}, "tags.0"),
            ({"status": "archived"}, "status"),
        ],
    )
    def test_field_validation(self, client, auth_headers, movies, payload, field):
        response = client.post(
            "/api/items",
            json={"category": movies["id"], "title": "Invalid", **payload},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field

    def test_requires_auth(self, client, movies):
        response = client.post("/api/items", json={"category": movies["id"], "title": "X"})
        assert response.status_code == 401


class TestCategoryItemCount:
    """カテゴリのアイテム数の再計算"""

    def test_create_and_delete_active_item(self, client, auth_headers, make_item, get_category, movies):
        item = make_item(movies["id"], status="active")
        assert get_category(movies["id"])["itemCount"] == 1

        response = client.delete(f"/api/items/{item['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert get_category(movies["id"])["itemCount"] == 0

    def test_draft_items_are_not_counted(self, make_item, get_category, movies):
        make_item(movies["id"], title="Draft")
        assert get_category(movies["id"])["itemCount"] == 0

    def test_move_between_categories(self, client, auth_headers, make_category, make_item, get_category):
        """カテゴリ移動で移動元・移動先の両方を更新し、他は変えない"""
        a = make_category("A")
        b = make_category("B")
        c = make_category("C")
        item = make_item(a["id"], title="Mover", status="active")
        make_item(c["id"], title="Bystander", status="active")

        response = client.put(
            f"/api/items/{item['id']}", json={"category": b["id"]}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["item"]["category"]["id"] == b["id"]

        assert get_category(a["id"])["itemCount"] == 0
        assert get_category(b["id"])["itemCount"] == 1
        assert get_category(c["id"])["itemCount"] == 1

    def test_status_change_recounts(self, client, auth_headers, make_item, get_category, movies):
        item = make_item(movies["id"])
        response = client.patch(
            f"/api/items/{item['id']}/status", json={"status": "active"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Item status updated successfully"
        assert response.json()["data"]["item"]["status"] == "active"
        assert get_category(movies["id"])["itemCount"] == 1

        client.patch(
            f"/api/items/{item['id']}/status", json={"status": "inactive"}, headers=auth_headers
        )
        assert get_category(movies["id"])["itemCount"] == 0

    def test_counter_failure_does_not_fail_request(self, client, auth_headers, monkeypatch, movies):
        """カウンタ更新の失敗はログのみでリクエストは成功する"""

        class BrokenFunc:
            def count(self, *args):
                raise RuntimeError("database unavailable")

        monkeypatch.setattr(category_counter, "func", BrokenFunc())

        response = client.post(
            "/api/items",
            json={"category": movies["id"], "title": "Survivor", "status": "active"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["item"]["slug"] == "survivor"


class TestBulkDelete:
    """一括削除テスト"""

    def test_recount_once_per_category(self, client, auth_headers, monkeypatch, make_category, make_item, get_category):
        a = make_category("A")
        b = make_category("B")
        ids = [
            make_item(a["id"], title="A1", status="active")["id"],
            make_item(a["id"], title="A2", status="active")["id"],
            make_item(b["id"], title="B1", status="active")["id"],
        ]

        calls = []
        original = category_counter.recount_category_items

        def counting_recount(db, category_id):
            calls.append(category_id)
            return original(db, category_id)

        monkeypatch.setattr(category_counter, "recount_category_items", counting_recount)

        response = client.request(
            "DELETE", "/api/items", json={"ids": ids}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "3 items deleted successfully"
        assert sorted(calls) == sorted([a["id"], b["id"]])

        assert get_category(a["id"])["itemCount"] == 0
        assert get_category(b["id"])["itemCount"] == 0

    def test_empty_ids_rejected(self, client, auth_headers):
        response = client.request("DELETE", "/api/items", json={"ids": []}, headers=auth_headers)
        assert response.status_code == 400

    def test_unknown_ids(self, client, auth_headers):
        response = client.request(
            "DELETE", "/api/items", json={"ids": ["nope"]}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["message"] == "0 items deleted successfully"


class TestGetAndListItems:
    """アイテム取得・一覧テスト"""

    def test_anonymous_view_increments_count(self, client, auth_headers, make_item, movies):
        item = make_item(movies["id"])
        first = client.get(f"/api/items/{item['id']}")
        second = client.get(f"/api/items/{item['id']}")
        assert first.json()["data"]["item"]["viewCount"] == 1
        assert second.json()["data"]["item"]["viewCount"] == 2

        admin_view = client.get(f"/api/items/{item['id']}", headers=auth_headers)
        assert admin_view.json()["data"]["item"]["viewCount"] == 2

    def test_not_found(self, client):
        response = client.get("/api/items/missing")
        assert response.status_code == 404
        assert response.json()["message"] == "Item not found"

    def test_filters(self, client, make_item, movies, games):
        make_item(movies["id"], title="Inception", featured=True, status="active")
        make_item(movies["id"], title="Tenet")
        make_item(games["id"], title="Hades", featured=True)

        by_category = client.get(f"/api/items?category={movies['id']}").json()["data"]
        assert by_category["pagination"]["total"] == 2

        featured = client.get("/api/items?featured=true&sort=title&order=asc").json()["data"]
        assert [i["title"] for i in featured["items"]] == ["Hades", "Inception"]

        active = client.get("/api/items?status=active").json()["data"]
        assert [i["title"] for i in active["items"]] == ["Inception"]

        searched = client.get("/api/items?search=TEN").json()["data"]
        assert [i["title"] for i in searched["items"]] == ["Tenet"]

    def test_pagination(self, client, insert_items, movies):
        insert_items(movies["id"], 25)
        data = client.get("/api/items?page=2&limit=10").json()["data"]
        assert len(data["items"]) == 10
        assert data["pagination"]["pages"] == 3
        assert data["pagination"]["hasNext"] is True
        assert data["pagination"]["hasPrev"] is True

    def test_blank_filters_are_ignored(self, client, make_item, movies, games):
        """空文字の絞り込み（?search=&status=...）は未指定と同じ"""
        make_item(movies["id"], title="Inception", status="active")
        make_item(games["id"], title="Hades", featured=True)

        response = client.get("/api/items?search=&status=&category=&featured=")
        assert response.status_code == 200
        assert response.json()["data"]["pagination"]["total"] == 2

    def test_invalid_filter_values(self, client):
        assert client.get("/api/items?status=archived").status_code == 400
        assert client.get("/api/items?featured=maybe").status_code == 400

    def test_invalid_sort(self, client):
        assert client.get("/api/items?sort=name").status_code == 400
        assert client.get("/api/items?order=sideways").status_code == 400


class TestUpdateItem:
    """アイテム更新テスト"""

    def test_update_fields(self, client, auth_headers, make_item, movies):
        item = make_item(movies["id"], ratings={"story": 4}, tags=["sci-fi"])
        response = client.put(
            f"/api/items/{item['id']}",
            json={"description": "Dreams within dreams", "ratings": None, "tags": None},
            headers=auth_headers,
        )
        assert response.status_code == 200
        updated = response.json()["data"]["item"]
        assert updated["description"] == "Dreams within dreams"
        assert updated["ratings"] is None
        assert updated["tags"] == []
        assert updated["slug"] == "inception"

    def test_retitle_regenerates_slug(self, client, auth_headers, make_item, movies):
        item = make_item(movies["id"])
        response = client.put(
            f"/api/items/{item['id']}", json={"title": "Inception 2"}, headers=auth_headers
        )
        assert response.json()["data"]["item"]["slug"] == "inception-2"

    def test_slug_collision(self, client, auth_headers, make_item, movies):
        make_item(movies["id"], title="Dune")
        other = make_item(movies["id"], title="Arrival")
        response = client.put(
            f"/api/items/{other['id']}", json={"slug": "dune"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Item with this slug already exists"

    def test_move_to_missing_category(self, client, auth_headers, make_item, movies):
        item = make_item(movies["id"])
        response = client.put(
            f"/api/items/{item['id']}", json={"category": "missing"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Category not found"


class TestItemStats:
    def test_stats(self, client, make_item, movies, games):
        make_item(movies["id"], title="A", status="active", rating=4, featured=True)
        make_item(movies["id"], title="B", status="inactive", rating=2)
        make_item(games["id"], title="C")

        response = client.get("/api/items/stats")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["overview"]["total"] == 3
        assert data["overview"]["active"] == 1
        assert data["overview"]["inactive"] == 1
        assert data["overview"]["draft"] == 1
        assert data["overview"]["featured"] == 1
        assert data["overview"]["averageRating"] == 3.0
        assert data["byCategory"][0] == {
            "id": movies["id"],
            "name": "Movies",
            "slug": "movies",
            "count": 2,
        }
        assert data["byCategory"][1]["count"] == 1
