"""
ブランド・製品ライン・作品・キャラクター・タグのテスト
"""

from app.models import Brand, Figure, Line, Tag


class TestBrands:
    """ブランドAPIのテスト"""

    def test_list_brands_with_counts(self, client, catalog):
        """名前順・フィギュア数とライン数付き"""
        response = client.get("/api/brands")
        assert response.status_code == 200
        data = response.json()
        assert [b["name"] for b in data] == ["Bandai Spirits", "Good Smile Company"]

        gsc = data[1]
        assert gsc["figure_count"] == 2  # 承認待ちは数えない
        assert gsc["line_count"] == 2
        assert data[0]["figure_count"] == 1

    def test_pending_brand_hidden(self, client, catalog, test_user, auth_headers):
        client.post("/api/brands", json={"name": "Max Factory"}, headers=auth_headers)

        response = client.get("/api/brands")
        assert "Max Factory" not in [b["name"] for b in response.json()]

    def test_include_pending_for_admin(self, client, catalog, auth_headers, admin_headers):
        """include_pending は管理者のみ有効"""
        client.post("/api/brands", json={"name": "Max Factory"}, headers=auth_headers)

        as_user = client.get("/api/brands?include_pending=true", headers=auth_headers)
        assert "Max Factory" not in [b["name"] for b in as_user.json()]

        as_admin = client.get("/api/brands?include_pending=true", headers=admin_headers)
        assert "Max Factory" in [b["name"] for b in as_admin.json()]

    def test_get_brand_detail(self, client, catalog):
        brand_id = catalog["brands"]["gsc"].id
        response = client.get(f"/api/brands/{brand_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["slug"] == "good-smile-company"
        assert {line["name"] for line in data["lines"]} == {"Nendoroid", "POP UP PARADE"}
        # 新しい順
        assert [f["name"] for f in data["figures"]] == [
            "POP UP PARADE Hatsune Miku",
            "Nendoroid Hatsune Miku",
        ]

    def test_get_brand_not_found(self, client, db_session):
        response = client.get("/api/brands/unknown-id")
        assert response.status_code == 404

    def test_pending_brand_visible_to_creator(self, client, db_session, auth_headers, other_headers):
        created = client.post("/api/brands", json={"name": "Max Factory"}, headers=auth_headers).json()

        assert client.get(f"/api/brands/{created['id']}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/brands/{created['id']}", headers=other_headers).status_code == 404
        assert client.get(f"/api/brands/{created['id']}").status_code == 404


class TestBrandContribution:
    """ブランド投稿のテスト"""

    def test_user_contribution_is_pending(self, client, test_user, auth_headers):
        response = client.post(
            "/api/brands",
            json={"name": "Max Factory", "country": "Japón"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["slug"] == "max-factory"
        assert data["created_by"]["id"] == test_user.id

    def test_admin_contribution_is_approved(self, client, admin_headers):
        response = client.post("/api/brands", json={"name": "Kotobukiya"}, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["status"] == "APPROVED"

    def test_duplicate_slug(self, client, catalog, auth_headers):
        """同じスラッグになる名前 → 400エラー"""
        response = client.post("/api/brands", json={"name": "good smile company"}, headers=auth_headers)
        assert response.status_code == 400

    def test_name_without_slug(self, client, auth_headers):
        """スラッグを作れない名前 → 400エラー"""
        response = client.post("/api/brands", json={"name": "グッスマ"}, headers=auth_headers)
        assert response.status_code == 400

    def test_requires_login(self, client, db_session):
        response = client.post("/api/brands", json={"name": "Max Factory"})
        assert response.status_code == 401


class TestBrandAdmin:
    """ブランドの更新・削除（管理者のみ）"""

    def test_update_requires_admin(self, client, catalog, auth_headers):
        brand_id = catalog["brands"]["gsc"].id
        response = client.put(f"/api/brands/{brand_id}", json={"country": "Perú"}, headers=auth_headers)
        assert response.status_code == 403

    def test_update_renames_slug(self, client, catalog, admin_headers):
        brand_id = catalog["brands"]["gsc"].id
        response = client.put(
            f"/api/brands/{brand_id}",
            json={"name": "GoodSmile", "country": "Japan"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["slug"] == "goodsmile"
        assert data["country"] == "Japan"

    def test_update_to_existing_name(self, client, catalog, admin_headers):
        brand_id = catalog["brands"]["gsc"].id
        response = client.put(
            f"/api/brands/{brand_id}", json={"name": "Bandai Spirits"}, headers=admin_headers
        )
        assert response.status_code == 400

    def test_delete_cascades(self, client, db_session, catalog, admin_headers):
        """ブランド削除で所属ライン・フィギュアも削除"""
        brand_id = catalog["brands"]["bandai"].id
        response = client.delete(f"/api/brands/{brand_id}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Brand).filter(Brand.id == brand_id).first() is None
        assert db_session.query(Line).filter(Line.brand_id == brand_id).count() == 0
        assert db_session.query(Figure).filter(Figure.brand_id == brand_id).count() == 0

    def test_delete_not_found(self, client, db_session, admin_headers):
        response = client.delete("/api/brands/unknown-id", headers=admin_headers)
        assert response.status_code == 404


class TestLines:
    """製品ラインAPIのテスト"""

    def test_list_lines(self, client, catalog):
        response = client.get("/api/lines")
        assert response.status_code == 200
        names = [line["name"] for line in response.json()]
        assert names == ["Nendoroid", "POP UP PARADE", "S.H.Figuarts"]

    def test_filter_by_brand(self, client, catalog):
        brand_id = catalog["brands"]["gsc"].id
        response = client.get(f"/api/lines?brand_id={brand_id}")
        data = response.json()
        assert {line["name"] for line in data} == {"Nendoroid", "POP UP PARADE"}
        assert all(line["brand"]["id"] == brand_id for line in data)

    def test_line_figure_count(self, client, catalog):
        response = client.get("/api/lines")
        counts = {line["name"]: line["figure_count"] for line in response.json()}
        assert counts["Nendoroid"] == 1
        assert counts["S.H.Figuarts"] == 1

    def test_get_line_detail(self, client, catalog):
        line_id = catalog["lines"]["nendoroid"].id
        response = client.get(f"/api/lines/{line_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["brand"]["name"] == "Good Smile Company"
        assert [f["name"] for f in data["figures"]] == ["Nendoroid Hatsune Miku"]

    def test_create_line_unknown_brand(self, client, db_session, auth_headers):
        response = client.post(
            "/api/lines", json={"name": "Figma", "brand_id": "unknown"}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_create_line_pending(self, client, catalog, auth_headers):
        response = client.post(
            "/api/lines",
            json={"name": "Figma", "brand_id": catalog["brands"]["gsc"].id, "release_year": 2008},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["slug"] == "figma"
        assert data["release_year"] == 2008

    def test_create_line_duplicate(self, client, catalog, auth_headers):
        response = client.post(
            "/api/lines",
            json={"name": "Nendoroid", "brand_id": catalog["brands"]["bandai"].id},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_update_line_brand(self, client, catalog, admin_headers):
        line_id = catalog["lines"]["popup"].id
        bandai_id = catalog["brands"]["bandai"].id
        response = client.put(f"/api/lines/{line_id}", json={"brand_id": bandai_id}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["brand"]["id"] == bandai_id

    def test_delete_line(self, client, db_session, catalog, admin_headers):
        line_id = catalog["lines"]["figuarts"].id
        response = client.delete(f"/api/lines/{line_id}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Figure).filter(Figure.line_id == line_id).count() == 0


class TestSeries:
    """作品APIのテスト"""

    def test_list_series(self, client, catalog):
        response = client.get("/api/series")
        assert response.status_code == 200
        counts = {s["name"]: s["figure_count"] for s in response.json()}
        assert counts == {"Dragon Ball Z": 1, "Hatsune Miku": 2}

    def test_get_series_detail(self, client, catalog):
        series_id = catalog["series"]["miku"].id
        response = client.get(f"/api/series/{series_id}")
        assert response.status_code == 200
        data = response.json()
        assert [c["name"] for c in data["characters"]] == ["Hatsune Miku"]
        assert data["figure_count"] == 2

    def test_get_series_not_found(self, client, db_session):
        assert client.get("/api/series/unknown-id").status_code == 404

    def test_create_series(self, client, db_session, auth_headers):
        response = client.post("/api/series", json={"name": "Sailor Moon"}, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["status"] == "PENDING"

    def test_delete_series_requires_admin(self, client, catalog, auth_headers):
        series_id = catalog["series"]["dbz"].id
        assert client.delete(f"/api/series/{series_id}", headers=auth_headers).status_code == 403


class TestCharacters:
    """キャラクターAPIのテスト"""

    def test_list_characters(self, client, catalog):
        response = client.get("/api/characters")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["series"]["name"] == "Hatsune Miku"
        assert data[0]["figure_count"] == 2

    def test_filter_by_series(self, client, catalog):
        dbz_id = catalog["series"]["dbz"].id
        response = client.get(f"/api/characters?series_id={dbz_id}")
        assert response.json() == []

    def test_get_character_detail(self, client, catalog):
        character_id = catalog["character"].id
        response = client.get(f"/api/characters/{character_id}")
        assert response.status_code == 200
        assert len(response.json()["figures"]) == 2

    def test_create_character_unknown_series(self, client, db_session, auth_headers):
        response = client.post(
            "/api/characters", json={"name": "Goku", "series_id": "unknown"}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_create_character(self, client, catalog, admin_headers):
        response = client.post(
            "/api/characters",
            json={"name": "Son Goku", "series_id": catalog["series"]["dbz"].id},
            headers=admin_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "APPROVED"
        assert data["series"]["name"] == "Dragon Ball Z"


class TestTags:
    """タグAPIのテスト"""

    def test_list_tags(self, client, catalog):
        response = client.get("/api/tags")
        assert response.status_code == 200
        assert response.json() == [
            {"id": catalog["tag"].id, "name": "PVC", "figure_count": 1}
        ]

    def test_create_tag_requires_admin(self, client, db_session, auth_headers):
        response = client.post("/api/tags", json={"name": "Resina"}, headers=auth_headers)
        assert response.status_code == 403

    def test_create_tag(self, client, db_session, admin_headers):
        response = client.post("/api/tags", json={"name": "  Resina "}, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["name"] == "Resina"

    def test_create_duplicate_tag_case_insensitive(self, client, catalog, admin_headers):
        response = client.post("/api/tags", json={"name": "pvc"}, headers=admin_headers)
        assert response.status_code == 400

    def test_rename_tag(self, client, catalog, admin_headers):
        tag_id = catalog["tag"].id
        response = client.put(f"/api/tags/{tag_id}", json={"name": "PVC/ABS"}, headers=admin_headers)
        assert response.status_code == 200
        assert response.json() == {"id": tag_id, "name": "PVC/ABS", "figure_count": 1}

    def test_delete_tag_keeps_figures(self, client, db_session, catalog, admin_headers):
        tag_id = catalog["tag"].id
        response = client.delete(f"/api/tags/{tag_id}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Tag).count() == 0
        figure = db_session.query(Figure).filter(Figure.id == catalog["figures"]["nendo_miku"].id).first()
        assert figure is not None
        assert figure.tags == []
