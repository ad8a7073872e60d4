"""
リストAPIのテスト
"""

from datetime import datetime, timedelta

from app.models import FigureList, ListItem


def make_list(db_session, user, name="Mis favoritas", minutes_ago=0, figures=(), **kwargs):
    figure_list = FigureList(
        name=name,
        created_by_id=user.id,
        created_at=datetime.utcnow() - timedelta(minutes=minutes_ago),
        **kwargs,
    )
    figure_list.items = [ListItem(figure_id=f.id, order=i) for i, f in enumerate(figures)]
    db_session.add(figure_list)
    db_session.commit()
    db_session.refresh(figure_list)
    return figure_list


class TestGetLists:
    """リスト一覧のテスト"""

    def test_newest_first(self, client, db_session, test_user):
        make_list(db_session, test_user, name="Antigua", minutes_ago=10)
        make_list(db_session, test_user, name="Nueva", minutes_ago=1)

        response = client.get("/api/lists")
        assert response.status_code == 200
        assert [fl["name"] for fl in response.json()] == ["Nueva", "Antigua"]

    def test_filters(self, client, db_session, test_user, admin_user):
        make_list(db_session, test_user, name="Personal")
        make_list(db_session, admin_user, name="Oficial", is_official=True)
        make_list(db_session, admin_user, name="Destacada", is_official=True, is_featured=True)

        official = client.get("/api/lists?official=true").json()
        assert {fl["name"] for fl in official} == {"Oficial", "Destacada"}

        featured = client.get("/api/lists?featured=true").json()
        assert [fl["name"] for fl in featured] == ["Destacada"]

        mine = client.get(f"/api/lists?user_id={test_user.id}").json()
        assert [fl["name"] for fl in mine] == ["Personal"]

    def test_preview_limited(self, client, db_session, catalog, test_user):
        """プレビューは先頭5件まで"""
        figures = list(catalog["figures"].values())
        make_list(db_session, test_user, figures=figures[:3])

        data = client.get("/api/lists").json()[0]
        assert data["item_count"] == 3
        assert len(data["preview"]) == 3
        assert data["created_by"]["username"] == "collector"


class TestCreateList:
    """リスト作成のテスト"""

    def test_create(self, client, test_user, auth_headers):
        response = client.post(
            "/api/lists",
            json={"name": "Nendoroids", "description": "Mi colección"},
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Nendoroids"
        assert data["items"] == []
        assert data["is_official"] is False
        assert data["created_by"]["id"] == test_user.id

    def test_official_flag_ignored_for_users(self, client, auth_headers):
        response = client.post(
            "/api/lists", json={"name": "Fake oficial", "is_official": True}, headers=auth_headers
        )
        assert response.json()["is_official"] is False

    def test_official_flag_for_admin(self, client, admin_headers):
        response = client.post(
            "/api/lists", json={"name": "Oficial", "is_official": True}, headers=admin_headers
        )
        assert response.json()["is_official"] is True

    def test_empty_name(self, client, auth_headers):
        response = client.post("/api/lists", json={"name": ""}, headers=auth_headers)
        assert response.status_code == 422

    def test_requires_login(self, client, db_session):
        response = client.post("/api/lists", json={"name": "Anon"})
        assert response.status_code == 401


class TestUpdateList:
    """リスト更新・削除のテスト"""

    def test_update_own_list(self, client, db_session, test_user, auth_headers):
        figure_list = make_list(db_session, test_user)
        response = client.put(
            f"/api/lists/{figure_list.id}",
            json={"name": "Renombrada", "description": None},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Renombrada"

    def test_update_other_users_list(self, client, db_session, other_user, auth_headers):
        figure_list = make_list(db_session, other_user)
        response = client.put(f"/api/lists/{figure_list.id}", json={"name": "Mía"}, headers=auth_headers)
        assert response.status_code == 403

    def test_featured_only_by_superadmin(self, client, db_session, test_user, admin_headers, superadmin_headers):
        figure_list = make_list(db_session, test_user)

        by_admin = client.put(
            f"/api/lists/{figure_list.id}", json={"is_featured": True, "is_official": True}, headers=admin_headers
        )
        assert by_admin.status_code == 200
        assert by_admin.json()["is_featured"] is False
        assert by_admin.json()["is_official"] is True

        by_superadmin = client.put(
            f"/api/lists/{figure_list.id}", json={"is_featured": True}, headers=superadmin_headers
        )
        assert by_superadmin.json()["is_featured"] is True

    def test_delete_list(self, client, db_session, catalog, test_user, auth_headers):
        figure_list = make_list(db_session, test_user, figures=[catalog["figures"]["goku"]])
        response = client.delete(f"/api/lists/{figure_list.id}", headers=auth_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(FigureList).count() == 0
        assert db_session.query(ListItem).count() == 0

    def test_admin_can_delete_any_list(self, client, db_session, test_user, admin_headers):
        figure_list = make_list(db_session, test_user)
        assert client.delete(f"/api/lists/{figure_list.id}", headers=admin_headers).status_code == 200

    def test_get_not_found(self, client, db_session):
        assert client.get("/api/lists/unknown").status_code == 404


class TestListItems:
    """リスト項目のテスト"""

    def test_add_items_in_order(self, client, db_session, catalog, test_user, auth_headers):
        figure_list = make_list(db_session, test_user)
        figures = catalog["figures"]

        first = client.post(
            f"/api/lists/{figure_list.id}/items", json={"figure_id": figures["goku"].id}, headers=auth_headers
        )
        assert first.status_code == 201
        second = client.post(
            f"/api/lists/{figure_list.id}/items", json={"figure_id": figures["nendo_miku"].id}, headers=auth_headers
        )
        items = second.json()["items"]
        assert [item["figure"]["id"] for item in items] == [figures["goku"].id, figures["nendo_miku"].id]
        assert [item["order"] for item in items] == [0, 1]

    def test_add_duplicate(self, client, db_session, catalog, test_user, auth_headers):
        goku = catalog["figures"]["goku"]
        figure_list = make_list(db_session, test_user, figures=[goku])
        response = client.post(
            f"/api/lists/{figure_list.id}/items", json={"figure_id": goku.id}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_add_unknown_figure(self, client, db_session, test_user, auth_headers):
        figure_list = make_list(db_session, test_user)
        response = client.post(
            f"/api/lists/{figure_list.id}/items", json={"figure_id": "unknown"}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_add_to_other_users_list(self, client, db_session, catalog, other_user, auth_headers):
        figure_list = make_list(db_session, other_user)
        response = client.post(
            f"/api/lists/{figure_list.id}/items",
            json={"figure_id": catalog["figures"]["goku"].id},
            headers=auth_headers,
        )
        assert response.status_code == 403

    def test_remove_item(self, client, db_session, catalog, test_user, auth_headers):
        goku = catalog["figures"]["goku"]
        figure_list = make_list(db_session, test_user, figures=[goku])

        response = client.delete(f"/api/lists/{figure_list.id}/items?figure_id={goku.id}", headers=auth_headers)
        assert response.status_code == 200

        missing = client.delete(f"/api/lists/{figure_list.id}/items?figure_id={goku.id}", headers=auth_headers)
        assert missing.status_code == 404

    def test_reorder(self, client, db_session, catalog, test_user, auth_headers):
        """指定したIDが先頭、残りは元の順で後ろに続く"""
        figures = catalog["figures"]
        order = [figures["nendo_miku"], figures["popup_miku"], figures["goku"]]
        figure_list = make_list(db_session, test_user, figures=order)

        response = client.put(
            f"/api/lists/{figure_list.id}/items/reorder",
            json={"figure_ids": [figures["goku"].id]},
            headers=auth_headers,
        )
        assert response.status_code == 200
        items = response.json()["items"]
        assert [item["figure"]["id"] for item in items] == [
            figures["goku"].id,
            figures["nendo_miku"].id,
            figures["popup_miku"].id,
        ]
        assert [item["order"] for item in items] == [0, 1, 2]
