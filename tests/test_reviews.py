"""
レビューAPIのテスト
"""

from datetime import datetime, timedelta

import pytest

from app.models import Review, UserFigure


def own(db_session, user, figure, status="OWNED"):
    db_session.add(UserFigure(user_id=user.id, figure_id=figure.id, status=status))
    db_session.commit()


def review_payload(figure, **overrides):
    payload = {
        "figure_id": figure.id,
        "rating": 5,
        "title": "Excelente",
        "description": "Muy buena calidad de pintura.",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def owned_goku(db_session, catalog, test_user):
    goku = catalog["figures"]["goku"]
    own(db_session, test_user, goku)
    return goku


class TestCreateReview:
    """レビュー投稿のテスト"""

    def test_create_review(self, client, owned_goku, test_user, auth_headers):
        response = client.post(
            "/api/reviews",
            json=review_payload(owned_goku, images=["https://img.example.com/r1.jpg"]),
            headers=auth_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["rating"] == 5
        assert data["user"]["id"] == test_user.id
        assert data["figure"]["id"] == owned_goku.id
        assert [img["url"] for img in data["images"]] == ["https://img.example.com/r1.jpg"]

    def test_images_truncated(self, client, owned_goku, auth_headers):
        """画像は最大5枚まで"""
        urls = [f"https://img.example.com/r{i}.jpg" for i in range(7)]
        response = client.post("/api/reviews", json=review_payload(owned_goku, images=urls), headers=auth_headers)
        images = response.json()["images"]
        assert len(images) == 5
        assert [img["order"] for img in images] == [0, 1, 2, 3, 4]

    def test_requires_owned(self, client, db_session, catalog, test_user, auth_headers):
        """ウィッシュリストのみ → 403エラー"""
        goku = catalog["figures"]["goku"]
        own(db_session, test_user, goku, status="WISHLIST")
        response = client.post("/api/reviews", json=review_payload(goku), headers=auth_headers)
        assert response.status_code == 403

    def test_not_in_collection(self, client, catalog, auth_headers):
        response = client.post(
            "/api/reviews", json=review_payload(catalog["figures"]["goku"]), headers=auth_headers
        )
        assert response.status_code == 403

    def test_unknown_figure(self, client, catalog, auth_headers):
        payload = review_payload(catalog["figures"]["goku"], figure_id="unknown")
        response = client.post("/api/reviews", json=payload, headers=auth_headers)
        assert response.status_code == 404

    def test_duplicate_review(self, client, owned_goku, auth_headers):
        client.post("/api/reviews", json=review_payload(owned_goku), headers=auth_headers)
        response = client.post("/api/reviews", json=review_payload(owned_goku, rating=3), headers=auth_headers)
        assert response.status_code == 400

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, client, owned_goku, auth_headers, rating):
        response = client.post(
            "/api/reviews", json=review_payload(owned_goku, rating=rating), headers=auth_headers
        )
        assert response.status_code == 422


class TestGetReviews:
    """レビュー一覧のテスト"""

    def test_filter_and_order(self, client, db_session, catalog, test_user, other_user):
        figures = catalog["figures"]
        now = datetime.utcnow()
        db_session.add_all([
            Review(user_id=test_user.id, figure_id=figures["goku"].id, rating=4,
                   title="Viejo", description="...", created_at=now - timedelta(days=2)),
            Review(user_id=other_user.id, figure_id=figures["goku"].id, rating=2,
                   title="Nuevo", description="...", created_at=now - timedelta(days=1)),
            Review(user_id=test_user.id, figure_id=figures["nendo_miku"].id, rating=5,
                   title="Miku", description="...", created_at=now),
        ])
        db_session.commit()

        by_figure = client.get(f"/api/reviews?figure_id={figures['goku'].id}").json()
        assert [r["title"] for r in by_figure] == ["Nuevo", "Viejo"]

        by_user = client.get(f"/api/reviews?user_id={test_user.id}").json()
        assert [r["title"] for r in by_user] == ["Miku", "Viejo"]


class TestUpdateReview:
    """レビュー更新・削除のテスト"""

    @pytest.fixture
    def review(self, client, owned_goku, auth_headers):
        response = client.post(
            "/api/reviews",
            json=review_payload(owned_goku, images=["https://img.example.com/a.jpg"]),
            headers=auth_headers,
        )
        return response.json()

    def test_update_own_review(self, client, review, auth_headers):
        response = client.put(
            f"/api/reviews/{review['id']}",
            json={"rating": 3, "images": ["https://img.example.com/b.jpg", "https://img.example.com/c.jpg"]},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["rating"] == 3
        assert data["title"] == "Excelente"
        assert [img["url"] for img in data["images"]] == [
            "https://img.example.com/b.jpg",
            "https://img.example.com/c.jpg",
        ]

    def test_update_other_users_review(self, client, review, other_user, other_headers):
        response = client.put(f"/api/reviews/{review['id']}", json={"rating": 1}, headers=other_headers)
        assert response.status_code == 403

    def test_admin_can_delete(self, client, db_session, review, admin_headers):
        response = client.delete(f"/api/reviews/{review['id']}", headers=admin_headers)
        assert response.status_code == 200

        db_session.expire_all()
        assert db_session.query(Review).count() == 0

    def test_delete_not_found(self, client, test_user, auth_headers):
        assert client.delete("/api/reviews/unknown", headers=auth_headers).status_code == 404
