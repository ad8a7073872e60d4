"""
管理者APIのテスト
承認フロー・ダッシュボード・ユーザー管理・システム設定・バッチ
"""

from datetime import datetime, timedelta

from app.models import Brand, Figure, Notification, User, UserFigure
from app.services.scheduler_service import batch_lock


def contribute_brand(client, headers, name="Max Factory"):
    response = client.post("/api/brands", json={"name": name}, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestPending:
    """承認待ち一覧のテスト"""

    def test_requires_admin(self, client, auth_headers):
        assert client.get("/api/admin/pending", headers=auth_headers).status_code == 403

    def test_all_with_counts(self, client, catalog, auth_headers, admin_headers):
        contribute_brand(client, auth_headers)

        response = client.get("/api/admin/pending", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["counts"] == {
            "figures": 1,
            "brands": 1,
            "lines": 0,
            "series": 0,
            "characters": 0,
            "total": 2,
        }
        assert [item["name"] for item in data["figures"]] == ["Nendoroid Pending Prototype"]
        assert data["figures"][0]["extra"] == {
            "brand": "Good Smile Company",
            "line": "Nendoroid",
            "release_date": "2026",
        }
        assert data["brands"][0]["created_by"]["username"] == "collector"

    def test_counts_only(self, client, catalog, admin_headers):
        data = client.get("/api/admin/pending?type=counts", headers=admin_headers).json()
        assert data["counts"]["total"] == 1
        assert data["figures"] == []

    def test_single_group(self, client, catalog, auth_headers, admin_headers):
        contribute_brand(client, auth_headers)
        data = client.get("/api/admin/pending?type=brands", headers=admin_headers).json()
        assert len(data["brands"]) == 1
        assert data["figures"] == []

    def test_invalid_type(self, client, admin_headers):
        assert client.get("/api/admin/pending?type=tags", headers=admin_headers).status_code == 400


class TestApprove:
    """承認・却下のテスト"""

    def test_approve_brand_notifies_creator(self, client, db_session, test_user, auth_headers, admin_headers):
        brand = contribute_brand(client, auth_headers)

        response = client.post(
            "/api/admin/approve",
            json={"type": "brand", "id": brand["id"], "approved": True},
            headers=admin_headers,
        )
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Brand).filter(Brand.id == brand["id"]).first().status == "APPROVED"
        notification = db_session.query(Notification).filter(Notification.user_id == test_user.id).one()
        assert notification.type == "CONTENT_APPROVED"
        assert notification.link == f"/catalog?brand_id={brand['id']}"

    def test_approve_figure_records_approver(self, client, db_session, catalog, admin_user, admin_headers):
        figure_id = catalog["figures"]["pending"].id
        response = client.post(
            "/api/admin/approve",
            json={"type": "figure", "id": figure_id, "approved": True},
            headers=admin_headers,
        )
        assert response.status_code == 200

        db_session.expire_all()
        figure = db_session.query(Figure).filter(Figure.id == figure_id).first()
        assert figure.status == "APPROVED"
        assert figure.approved_by_id == admin_user.id
        # フィギュア作成時と同じローカル時刻で記録
        assert abs(figure.approved_at - datetime.now()) < timedelta(minutes=1)
        # 投稿者不明なら通知なし
        assert db_session.query(Notification).count() == 0

    def test_no_notification_for_own_content(self, client, db_session, admin_user, admin_headers):
        brand = Brand(name="Alter", slug="alter", status="PENDING", created_by_id=admin_user.id)
        db_session.add(brand)
        db_session.commit()

        client.post(
            "/api/admin/approve",
            json={"type": "brand", "id": brand.id, "approved": True},
            headers=admin_headers,
        )
        assert db_session.query(Notification).count() == 0

    def test_reject_returns_to_pending(self, client, db_session, catalog, admin_headers):
        """承認済みブランドを却下 → PENDING に戻り、配下のライン・フィギュアは残る"""
        brand_id = catalog["brands"]["gsc"].id
        figure_count = db_session.query(Figure).count()

        response = client.post(
            "/api/admin/approve",
            json={"type": "brand", "id": brand_id, "approved": False},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "コンテンツを却下しました"

        db_session.expire_all()
        assert db_session.query(Brand).filter(Brand.id == brand_id).first().status == "PENDING"
        assert db_session.query(Figure).count() == figure_count
        assert "Good Smile Company" not in [b["name"] for b in client.get("/api/brands").json()]

    def test_reject_figure_clears_approver(self, client, db_session, catalog, admin_headers):
        figure_id = catalog["figures"]["pending"].id
        client.post(
            "/api/admin/approve",
            json={"type": "figure", "id": figure_id, "approved": True},
            headers=admin_headers,
        )
        response = client.post(
            "/api/admin/approve",
            json={"type": "figure", "id": figure_id, "approved": False},
            headers=admin_headers,
        )
        assert response.status_code == 200

        db_session.expire_all()
        figure = db_session.query(Figure).filter(Figure.id == figure_id).first()
        assert figure.status == "PENDING"
        assert figure.approved_by_id is None
        assert figure.approved_at is None

    def test_approved_content_visible(self, client, auth_headers, admin_headers):
        brand = contribute_brand(client, auth_headers)
        client.post(
            "/api/admin/approve",
            json={"type": "brand", "id": brand["id"], "approved": True},
            headers=admin_headers,
        )

        assert "Max Factory" in [b["name"] for b in client.get("/api/brands").json()]

    def test_missing_approved_flag(self, client, db_session, catalog, admin_headers):
        """approved 未指定・真偽値以外 → 400エラー（承認されない）"""
        figure_id = catalog["figures"]["pending"].id

        missing = client.post(
            "/api/admin/approve", json={"type": "figure", "id": figure_id}, headers=admin_headers
        )
        assert missing.status_code == 400

        not_bool = client.post(
            "/api/admin/approve",
            json={"type": "figure", "id": figure_id, "approved": "yes"},
            headers=admin_headers,
        )
        assert not_bool.status_code == 400

        db_session.expire_all()
        assert db_session.query(Figure).filter(Figure.id == figure_id).first().status == "PENDING"

    def test_invalid_params(self, client, admin_headers):
        """type / id 不正 → 400エラー"""
        assert client.post(
            "/api/admin/approve", json={"id": "x", "approved": True}, headers=admin_headers
        ).status_code == 400
        assert client.post(
            "/api/admin/approve", json={"type": "tag", "id": "x", "approved": True}, headers=admin_headers
        ).status_code == 400

    def test_not_found(self, client, admin_headers):
        response = client.post(
            "/api/admin/approve",
            json={"type": "brand", "id": "unknown", "approved": True},
            headers=admin_headers,
        )
        assert response.status_code == 404

    def test_delete_pending(self, client, db_session, catalog, admin_headers):
        figure_id = catalog["figures"]["pending"].id
        response = client.delete(f"/api/admin/approve?type=figure&id={figure_id}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Figure).filter(Figure.id == figure_id).first() is None


class TestStats:
    """ダッシュボード件数のテスト"""

    def test_stats(self, client, catalog, admin_headers):
        response = client.get("/api/admin/stats", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["figures"] == 3
        assert data["pending_figures"] == 1
        assert data["brands"] == 2
        assert data["lines"] == 3
        assert data["tags"] == 1
        assert data["users"] == 1


class TestUserManagement:
    """ユーザー管理（スーパー管理者のみ）のテスト"""

    def test_list_users_with_counts(self, client, db_session, catalog, test_user, superadmin_headers):
        db_session.add(UserFigure(user_id=test_user.id, figure_id=catalog["figures"]["goku"].id, status="OWNED"))
        db_session.commit()

        response = client.get("/api/admin/users", headers=superadmin_headers)
        assert response.status_code == 200
        users = {u["username"]: u for u in response.json()}
        assert users["collector"]["collection_count"] == 1
        assert users["collector"]["list_count"] == 0
        assert users["owner"]["role"] == "SUPERADMIN"

    def test_admin_cannot_manage_users(self, client, admin_headers):
        assert client.get("/api/admin/users", headers=admin_headers).status_code == 403

    def test_change_role(self, client, test_user, superadmin_headers):
        response = client.put(
            f"/api/admin/users/{test_user.id}", json={"role": "ADMIN"}, headers=superadmin_headers
        )
        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"

    def test_invalid_role(self, client, test_user, superadmin_headers):
        response = client.put(
            f"/api/admin/users/{test_user.id}", json={"role": "KING"}, headers=superadmin_headers
        )
        assert response.status_code == 400

    def test_cannot_change_own_role(self, client, superadmin_user, superadmin_headers):
        response = client.put(
            f"/api/admin/users/{superadmin_user.id}", json={"role": "USER"}, headers=superadmin_headers
        )
        assert response.status_code == 400

    def test_change_role_unknown_user(self, client, superadmin_headers):
        response = client.put("/api/admin/users/unknown", json={"role": "USER"}, headers=superadmin_headers)
        assert response.status_code == 404

    def test_delete_user(self, client, db_session, test_user, superadmin_headers):
        user_id = test_user.id
        response = client.delete(f"/api/admin/users/{user_id}", headers=superadmin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(User).filter(User.id == user_id).first() is None

    def test_cannot_delete_self(self, client, superadmin_user, superadmin_headers):
        response = client.delete(f"/api/admin/users/{superadmin_user.id}", headers=superadmin_headers)
        assert response.status_code == 400


class TestSystemConfig:
    """システム設定のテスト"""

    def test_get_all_is_public(self, client, db_session):
        response = client.get("/api/admin/system-config")
        assert response.status_code == 200
        assert response.json() == {"SHOW_PENDING_FIGURES": False}

    def test_get_unknown_key(self, client, db_session):
        assert client.get("/api/admin/system-config?key=UNKNOWN").status_code == 400

    def test_set_config(self, client, superadmin_headers):
        response = client.post(
            "/api/admin/system-config",
            json={"key": "SHOW_PENDING_FIGURES", "value": True},
            headers=superadmin_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"key": "SHOW_PENDING_FIGURES", "value": True}

        single = client.get("/api/admin/system-config?key=SHOW_PENDING_FIGURES").json()
        assert single == {"key": "SHOW_PENDING_FIGURES", "value": True}

    def test_set_unknown_key(self, client, superadmin_headers):
        response = client.post(
            "/api/admin/system-config", json={"key": "UNKNOWN", "value": 1}, headers=superadmin_headers
        )
        assert response.status_code == 400

    def test_set_requires_superadmin(self, client, admin_headers):
        response = client.post(
            "/api/admin/system-config",
            json={"key": "SHOW_PENDING_FIGURES", "value": True},
            headers=admin_headers,
        )
        assert response.status_code == 403


class TestOperations:
    """キャッシュ・スケジューラー・バッチのテスト"""

    def test_cache_stats(self, client, admin_headers):
        response = client.get("/api/admin/cache/stats", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "hit_rate" in data["cache"]

    def test_scheduler_status(self, client, admin_headers):
        """テストではスケジューラー無効"""
        response = client.get("/api/admin/scheduler/status", headers=admin_headers)
        assert response.json() == {"running": False, "jobs": []}

    def test_trigger_release_update(self, client, db_session, catalog, test_user, superadmin_headers):
        figure = catalog["figures"]["nendo_miku"]
        db_session.add(UserFigure(user_id=test_user.id, figure_id=figure.id, status="WISHLIST"))
        db_session.commit()

        response = client.post("/api/admin/batch/release-update", headers=superadmin_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["released"] == 1
        assert data["notifications"] == 1

        db_session.expire_all()
        assert db_session.query(Figure).filter(Figure.id == figure.id).first().is_released is True

    def test_trigger_while_running(self, client, superadmin_headers):
        """実行中なら 409"""
        batch_lock.acquire()
        try:
            response = client.post("/api/admin/batch/release-update", headers=superadmin_headers)
        finally:
            batch_lock.release()
        assert response.status_code == 409

    def test_trigger_requires_superadmin(self, client, admin_headers):
        assert client.post("/api/admin/batch/release-update", headers=admin_headers).status_code == 403
