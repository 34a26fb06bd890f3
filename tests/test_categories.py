"""
カテゴリエンドポイントのテスト
"""


class TestCreateCategory:
    """カテゴリ作成テスト"""

    def test_create_generates_slug(self, client, auth_headers):
        response = client.post(
            "/api/categories",
            json={"name": "  TV Series! ", "icon": "📺", "sortOrder": 2},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Category created successfully"
        category = data["data"]["category"]
        assert category["name"] == "TV Series!"
        assert category["slug"] == "tv-series"
        assert category["status"] == "active"
        assert category["itemCount"] == 0
        assert category["sortOrder"] == 2
        assert category["description"] == ""
        assert category["gradient"] == "from-blue-500 to-purple-600"

    def test_same_name_gets_suffix(self, make_category):
        """同じ名前のカテゴリは s, s-1, s-2 の順"""
        first = make_category("Movies")
        second = make_category("Movies")
        third = make_category("Movies")
        assert first["slug"] == "movies"
        assert second["slug"] == "movies-1"
        assert third["slug"] == "movies-2"

    def test_explicit_slug(self, make_category):
        category = make_category("Anime & Manga", slug="anime")
        assert category["slug"] == "anime"

    def test_invalid_slug_pattern(self, client, auth_headers):
        response = client.post(
            "/api/categories",
            json={"name": "Anime", "slug": "Not Valid"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "slug"

    def test_name_without_slug_characters(self, client, auth_headers):
        response = client.post(
            "/api/categories", json={"name": "!!!"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Category name is required to generate slug"

    def test_missing_name(self, client, auth_headers):
        response = client.post("/api/categories", json={}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "name"

    def test_requires_auth(self, client):
        response = client.post("/api/categories", json={"name": "Movies"})
        assert response.status_code == 401

    def test_admin_role_can_create(self, client, admin_headers):
        response = client.post(
            "/api/categories", json={"name": "Games"}, headers=admin_headers
        )
        assert response.status_code == 201


class TestListCategories:
    """カテゴリ一覧テスト"""

    def test_pagination(self, client, insert_categories):
        """25件中 page=2&limit=10 は10件、pages=3、前後ページあり"""
        insert_categories(25)
        response = client.get("/api/categories?page=2&limit=10&sort=sortOrder&order=asc")
        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["categories"]) == 10
        assert data["categories"][0]["sortOrder"] == 10
        assert data["pagination"] == {
            "current": 2,
            "pages": 3,
            "total": 25,
            "limit": 10,
            "hasNext": True,
            "hasPrev": True,
        }

    def test_last_page(self, client, insert_categories):
        insert_categories(25)
        data = client.get("/api/categories?page=3&limit=10").json()["data"]
        assert len(data["categories"]) == 5
        assert data["pagination"]["hasNext"] is False

    def test_search(self, client, make_category):
        make_category("Movies", description="Blockbuster hits")
        make_category("Games", description="Gaming content")
        data = client.get("/api/categories?search=blockbuster").json()["data"]
        assert [c["name"] for c in data["categories"]] == ["Movies"]

    def test_status_filter(self, client, make_category):
        make_category("Movies")
        make_category("Archive", status="inactive")
        data = client.get("/api/categories?status=inactive").json()["data"]
        assert [c["name"] for c in data["categories"]] == ["Archive"]

    def test_blank_filters_are_ignored(self, client, make_category):
        make_category("Movies")
        make_category("Archive", status="inactive")
        response = client.get("/api/categories?search=&status=")
        assert response.status_code == 200
        assert response.json()["data"]["pagination"]["total"] == 2

    def test_invalid_status(self, client):
        assert client.get("/api/categories?status=deleted").status_code == 400

    def test_invalid_sort(self, client):
        response = client.get("/api/categories?sort=password")
        assert response.status_code == 400

    def test_limit_out_of_range(self, client):
        response = client.get("/api/categories?limit=1000")
        assert response.status_code == 400


class TestGetCategory:
    def test_get(self, client, make_category):
        category = make_category("Movies")
        response = client.get(f"/api/categories/{category['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["category"]["slug"] == "movies"

    def test_not_found(self, client):
        response = client.get("/api/categories/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Category not found"}


class TestUpdateCategory:
    """カテゴリ更新テスト"""

    def test_rename_regenerates_slug(self, client, auth_headers, make_category):
        category = make_category("Movies")
        response = client.put(
            f"/api/categories/{category['id']}",
            json={"name": "Films"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        updated = response.json()["data"]["category"]
        assert updated["name"] == "Films"
        assert updated["slug"] == "films"

    def test_keep_own_slug(self, client, auth_headers, make_category):
        """自分自身のスラッグとは衝突しない"""
        category = make_category("Movies")
        response = client.put(
            f"/api/categories/{category['id']}",
            json={"name": "Movies", "description": "Updated"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["category"]["slug"] == "movies"

    def test_slug_collision(self, client, auth_headers, make_category):
        make_category("Movies")
        games = make_category("Games")
        response = client.put(
            f"/api/categories/{games['id']}",
            json={"slug": "movies"},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Category with this slug already exists"

    def test_update_not_found(self, client, auth_headers):
        response = client.put(
            "/api/categories/missing", json={"name": "X"}, headers=auth_headers
        )
        assert response.status_code == 404


class TestDeleteCategory:
    """カテゴリ削除テスト"""

    def test_delete(self, client, auth_headers, make_category):
        category = make_category("Movies")
        response = client.delete(f"/api/categories/{category['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Category deleted successfully"
        assert client.get(f"/api/categories/{category['id']}").status_code == 404

    def test_delete_blocked_by_items(self, client, auth_headers, make_category, make_item):
        """アイテムが残っているカテゴリは削除できない"""
        category = make_category("Movies", status="inactive")
        make_item(category["id"], status="active")
        make_item(category["id"], title="Draft one")

        response = client.delete(f"/api/categories/{category['id']}", headers=auth_headers)
        assert response.status_code == 409
        assert response.json()["message"] == (
            "Cannot delete category. It has 2 items. Please move or delete items first."
        )
        assert client.get(f"/api/categories/{category['id']}").status_code == 200

    def test_delete_not_found(self, client, auth_headers):
        response = client.delete("/api/categories/missing", headers=auth_headers)
        assert response.status_code == 404


class TestCategoryStats:
    def test_stats(self, client, make_category, make_item):
        movies = make_category("Movies")
        make_category("Anime")
        make_item(movies["id"], title="A", status="active")
        make_item(movies["id"], title="B", status="active")
        make_item(movies["id"], title="C")

        response = client.get("/api/categories/stats")
        assert response.status_code == 200
        stats = response.json()["data"]["stats"]
        assert [s["name"] for s in stats] == ["Anime", "Movies"]
        assert stats[0]["totalItems"] == 0
        assert stats[1]["totalItems"] == 3
        assert stats[1]["activeItems"] == 2
        assert stats[1]["draftItems"] == 1
