"""
フィギュア（カタログ）APIのテスト
"""

from app.models.figure import Figure
from app.models.notification import Notification
from app.models.user_figure import UserFigure


def names(response):
    return [f["name"] for f in response.json()["figures"]]


class TestCatalogList:
    """カタログ一覧テスト"""

    def test_list_excludes_pending(self, client, catalog):
        response = client.get("/api/figures")
        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total"] == 3
        assert "Nendoroid Pending Prototype" not in names(response)

    def test_default_sort_newest_first(self, client, catalog):
        response = client.get("/api/figures")
        assert names(response) == [
            "S.H.Figuarts Son Goku",
            "POP UP PARADE Hatsune Miku",
            "Nendoroid Hatsune Miku",
        ]

    def test_filter_by_brand(self, client, catalog):
        brand_id = catalog["brands"]["bandai"].id
        response = client.get("/api/figures", params={"brand_id": brand_id})
        assert names(response) == ["S.H.Figuarts Son Goku"]

    def test_filter_by_multiple_lines(self, client, catalog):
        line_ids = ",".join([catalog["lines"]["nendoroid"].id, catalog["lines"]["figuarts"].id])
        response = client.get("/api/figures", params={"line_id": line_ids})
        assert set(names(response)) == {"Nendoroid Hatsune Miku", "S.H.Figuarts Son Goku"}

    def test_filter_by_series_tag_and_character(self, client, catalog):
        series_id = catalog["series"]["miku"].id
        response = client.get("/api/figures", params={"series_id": series_id})
        assert response.json()["pagination"]["total"] == 2

        response = client.get("/api/figures", params={"tag_id": catalog["tag"].id})
        assert names(response) == ["Nendoroid Hatsune Miku"]

        response = client.get("/api/figures", params={"character_id": catalog["character"].id})
        assert response.json()["pagination"]["total"] == 2

    def test_search_is_case_insensitive_substring(self, client, catalog):
        response = client.get("/api/figures", params={"search": "goku"})
        assert names(response) == ["S.H.Figuarts Son Goku"]

    def test_search_wildcards_are_literal(self, client, catalog):
        """% と _ を含む検索語 → 該当なし"""
        for keyword in ("%", "_", "Nendoroid%Miku"):
            response = client.get("/api/figures", params={"search": keyword})
            assert response.json()["pagination"]["total"] == 0

    def test_filter_is_released(self, client, catalog):
        response = client.get("/api/figures", params={"is_released": "true"})
        assert names(response) == ["POP UP PARADE Hatsune Miku"]

    def test_price_range_in_currency(self, client, catalog):
        response = client.get("/api/figures", params={"min_price": 1000, "max_price": 2000})
        assert names(response) == ["Nendoroid Hatsune Miku"]

        response = client.get("/api/figures", params={"currency": "USD", "min_price": 50})
        assert names(response) == ["S.H.Figuarts Son Goku"]

    def test_sort_by_price(self, client, catalog):
        response = client.get("/api/figures", params={"sort": "price_asc"})
        assert names(response) == [
            "POP UP PARADE Hatsune Miku",
            "Nendoroid Hatsune Miku",
            "S.H.Figuarts Son Goku",
        ]

    def test_sort_by_release_date_puts_unknown_last(self, client, catalog):
        response = client.get("/api/figures", params={"sort": "date_asc"})
        assert names(response) == [
            "POP UP PARADE Hatsune Miku",
            "Nendoroid Hatsune Miku",
            "S.H.Figuarts Son Goku",
        ]
        response = client.get("/api/figures", params={"sort": "date_desc"})
        assert names(response)[-1] == "S.H.Figuarts Son Goku"

    def test_pagination(self, client, catalog):
        response = client.get("/api/figures", params={"page": 2, "limit": 2})
        data = response.json()
        assert len(data["figures"]) == 1
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}

    def test_invalid_sort_and_limit(self, client, catalog):
        assert client.get("/api/figures", params={"sort": "popular"}).status_code == 422
        assert client.get("/api/figures", params={"limit": 101}).status_code == 422

    def test_include_pending_for_admin_only(self, client, catalog, auth_headers, admin_headers):
        response = client.get("/api/figures", params={"include_pending": "true"}, headers=auth_headers)
        assert response.json()["pagination"]["total"] == 3

        response = client.get("/api/figures", params={"include_pending": "true"}, headers=admin_headers)
        assert response.json()["pagination"]["total"] == 4

    def test_show_pending_system_setting(self, client, catalog, superadmin_headers):
        client.post(
            "/api/admin/system-config",
            headers=superadmin_headers,
            json={"key": "SHOW_PENDING_FIGURES", "value": True},
        )
        response = client.get("/api/figures")
        assert response.json()["pagination"]["total"] == 4

    def test_summary_fields(self, client, catalog):
        response = client.get("/api/figures", params={"search": "Nendoroid Hatsune"})
        figure = response.json()["figures"][0]
        assert figure["image"] == "https://img.example.com/miku-1.jpg"
        assert figure["brand"]["name"] == "Good Smile Company"
        assert figure["line"]["name"] == "Nendoroid"
        assert figure["release_date"] == "2025-03"


class TestFacets:
    """ファセット集計テスト"""

    def test_facets_counts(self, client, catalog):
        response = client.get("/api/figures/facets")
        assert response.status_code == 200
        data = response.json()

        brands = {b["name"]: b["figure_count"] for b in data["brands"]}
        assert brands == {"Bandai Spirits": 1, "Good Smile Company": 2}

        lines = {line["name"]: line["figure_count"] for line in data["lines"]}
        assert lines["Nendoroid"] == 1

        miku = next(s for s in data["series"] if s["name"] == "Hatsune Miku")
        assert miku["figure_count"] == 2
        assert miku["brand_ids"] == [catalog["brands"]["gsc"].id]
        assert set(miku["line_ids"]) == {
            catalog["lines"]["nendoroid"].id,
            catalog["lines"]["popup"].id,
        }

    def test_facets_cache_invalidated_on_write(self, client, catalog, admin_headers):
        client.get("/api/figures/facets")
        client.delete(f"/api/figures/{catalog['figures']['goku'].id}", headers=admin_headers)

        data = client.get("/api/figures/facets").json()
        brands = {b["name"]: b["figure_count"] for b in data["brands"]}
        assert brands["Bandai Spirits"] == 0


class TestFigureDetail:
    """フィギュア詳細テスト"""

    def test_detail(self, client, catalog):
        figure_id = catalog["figures"]["nendo_miku"].id
        response = client.get(f"/api/figures/{figure_id}")
        assert response.status_code == 200
        data = response.json()
        assert [img["order"] for img in data["images"]] == [0, 1]
        assert data["tags"][0]["name"] == "PVC"
        assert data["character"]["name"] == "Hatsune Miku"
        assert data["avg_rating"] is None
        assert data["review_count"] == 0
        assert data["formatted_price"] == "¥6,800"
        assert data["dimensions"]["unit"] == "cm"
        assert data["dimensions"]["height"] == 10.0

    def test_detail_in_inches(self, client, catalog):
        figure_id = catalog["figures"]["nendo_miku"].id
        response = client.get(f"/api/figures/{figure_id}", params={"unit": "in"})
        dims = response.json()["dimensions"]
        assert dims["unit"] == "in"
        assert dims["height"] == 3.94

    def test_detail_not_found(self, client, catalog):
        assert client.get("/api/figures/does-not-exist").status_code == 404

    def test_pending_visible_to_admin_only(self, client, catalog, auth_headers, admin_headers):
        figure_id = catalog["figures"]["pending"].id
        assert client.get(f"/api/figures/{figure_id}").status_code == 404
        assert client.get(f"/api/figures/{figure_id}", headers=auth_headers).status_code == 404
        assert client.get(f"/api/figures/{figure_id}", headers=admin_headers).status_code == 200


class TestFigureCreate:
    """フィギュア登録テスト"""

    def payload(self, catalog, **overrides):
        data = {
            "name": "Nendoroid Kagamine Rin",
            "brand_id": catalog["brands"]["gsc"].id,
            "line_id": catalog["lines"]["nendoroid"].id,
            "price_yen": 5800,
            "release_date": "2025-08",
            "images": ["https://img.example.com/rin-a.jpg", "https://img.example.com/rin-b.jpg"],
            "tag_ids": [catalog["tag"].id],
            "series_ids": [catalog["series"]["miku"].id],
        }
        data.update(overrides)
        return data

    def test_user_submission_is_pending(self, client, catalog, test_user, auth_headers):
        response = client.post("/api/figures", headers=auth_headers, json=self.payload(catalog))
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["release_year"] == 2025
        assert data["release_month"] == 8
        assert data["release_day"] is None
        assert [img["url"] for img in data["images"]] == [
            "https://img.example.com/rin-a.jpg",
            "https://img.example.com/rin-b.jpg",
        ]

        # 投稿者本人は承認待ちでも閲覧できる
        detail = client.get(f"/api/figures/{data['id']}", headers=auth_headers)
        assert detail.status_code == 200

    def test_admin_submission_is_approved(self, client, catalog, admin_user, admin_headers):
        response = client.post("/api/figures", headers=admin_headers, json=self.payload(catalog))
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["approved_by"]["id"] == admin_user.id

    def test_missing_required_fields(self, client, catalog, auth_headers):
        response = client.post(
            "/api/figures",
            headers=auth_headers,
            json={"name": "Sin marca"},
        )
        assert response.status_code == 400

    def test_unknown_brand_or_line(self, client, catalog, auth_headers):
        response = client.post(
            "/api/figures",
            headers=auth_headers,
            json=self.payload(catalog, brand_id="missing-brand"),
        )
        assert response.status_code == 404

        response = client.post(
            "/api/figures",
            headers=auth_headers,
            json=self.payload(catalog, line_id="missing-line"),
        )
        assert response.status_code == 404

    def test_line_must_belong_to_brand(self, client, catalog, auth_headers):
        response = client.post(
            "/api/figures",
            headers=auth_headers,
            json=self.payload(catalog, line_id=catalog["lines"]["figuarts"].id),
        )
        assert response.status_code == 400

    def test_invalid_release_date(self, client, catalog, auth_headers):
        response = client.post(
            "/api/figures",
            headers=auth_headers,
            json=self.payload(catalog, release_date="2025-13"),
        )
        assert response.status_code == 422

    def test_unauthenticated(self, client, catalog):
        response = client.post("/api/figures", json=self.payload(catalog))
        assert response.status_code == 401


class TestFigureUpdate:
    """フィギュア更新・削除テスト"""

    def test_put_requires_admin(self, client, catalog, auth_headers):
        figure_id = catalog["figures"]["goku"].id
        response = client.put(f"/api/figures/{figure_id}", headers=auth_headers, json={"name": "x"})
        assert response.status_code == 403

    def test_put_replaces_given_fields(self, client, catalog, admin_headers):
        figure_id = catalog["figures"]["nendo_miku"].id
        response = client.put(
            f"/api/figures/{figure_id}",
            headers=admin_headers,
            json={"price_mxn": 1650, "images": ["https://img.example.com/new.jpg"], "tag_ids": []},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["price_mxn"] == 1650
        assert [img["url"] for img in data["images"]] == ["https://img.example.com/new.jpg"]
        assert data["tags"] == []
        # 指定していない項目はそのまま
        assert data["name"] == "Nendoroid Hatsune Miku"
        assert data["release_date"] == "2025-03"

    def test_patch_released_notifies_wishlist_and_preorder(
        self, client, db_session, catalog, test_user, other_user, make_user, admin_headers
    ):
        figure = catalog["figures"]["nendo_miku"]
        owner = make_user("owner_user")
        db_session.add_all([
            UserFigure(user_id=test_user.id, figure_id=figure.id, status="WISHLIST"),
            UserFigure(user_id=other_user.id, figure_id=figure.id, status="PREORDER"),
            UserFigure(user_id=owner.id, figure_id=figure.id, status="OWNED"),
        ])
        db_session.commit()

        response = client.patch(
            f"/api/figures/{figure.id}",
            headers=admin_headers,
            json={"is_released": True},
        )
        assert response.status_code == 200
        assert response.json()["is_released"] is True

        db_session.expire_all()
        notifications = db_session.query(Notification).filter(Notification.figure_id == figure.id).all()
        assert {n.user_id for n in notifications} == {test_user.id, other_user.id}
        assert all(n.type == "FIGURE_RELEASED" for n in notifications)
        assert all(n.link == f"/catalog/{figure.id}" for n in notifications)

    def test_patch_already_released_does_not_notify(self, client, db_session, catalog, test_user, admin_headers):
        figure = catalog["figures"]["popup_miku"]
        db_session.add(UserFigure(user_id=test_user.id, figure_id=figure.id, status="WISHLIST"))
        db_session.commit()

        client.patch(f"/api/figures/{figure.id}", headers=admin_headers, json={"is_nsfw": True})

        db_session.expire_all()
        assert db_session.query(Notification).count() == 0

    def test_delete(self, client, db_session, catalog, admin_headers):
        figure_id = catalog["figures"]["goku"].id
        response = client.delete(f"/api/figures/{figure_id}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Figure).filter(Figure.id == figure_id).first() is None

    def test_create_variant(self, client, catalog, admin_headers, auth_headers):
        figure_id = catalog["figures"]["nendo_miku"].id
        body = {"name": "Edición Racing", "price_yen": 7200, "images": ["https://img.example.com/racing.jpg"]}

        assert client.post(f"/api/figures/{figure_id}/variants", headers=auth_headers, json=body).status_code == 403

        response = client.post(f"/api/figures/{figure_id}/variants", headers=admin_headers, json=body)
        assert response.status_code == 201
        assert response.json()["images"][0]["order"] == 0

        detail = client.get(f"/api/figures/{figure_id}").json()
        assert [v["name"] for v in detail["variants"]] == ["Edición Racing"]
