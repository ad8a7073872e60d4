"""
発売状況更新バッチのテスト
"""

from datetime import date

import pytest

from app.models import Figure, Notification, UserFigure
from app.services.cache_service import catalog_cache
from app.services.release_batch import ReleaseBatchProcessor, is_release_due


class TestIsReleaseDue:
    """発売日経過判定のテスト"""

    @pytest.mark.parametrize("year, month, day, today, expected", [
        (2025, 3, 15, date(2025, 3, 15), True),
        (2025, 3, 15, date(2025, 3, 14), False),
        # 月までの場合は翌月から
        (2025, 3, None, date(2025, 3, 31), False),
        (2025, 3, None, date(2025, 4, 1), True),
        # 年のみの場合は翌年から
        (2025, None, None, date(2025, 12, 31), False),
        (2025, None, None, date(2026, 1, 1), True),
        (None, None, None, date(2030, 1, 1), False),
    ])
    def test_is_release_due(self, year, month, day, today, expected):
        figure = Figure(name="x", release_year=year, release_month=month, release_day=day)
        assert is_release_due(figure, today) is expected

    def test_invalid_day(self):
        figure = Figure(name="x", release_year=2025, release_month=2, release_day=30)
        assert is_release_due(figure, date(2026, 1, 1)) is False


class TestReleaseBatchProcessor:
    """ReleaseBatchProcessor のテスト"""

    def test_nothing_due(self, db_session, catalog):
        result = ReleaseBatchProcessor(db_session, today=date(2025, 3, 10)).run()
        assert result["total"] == 0
        assert result["released"] == 0
        assert result["notifications"] == 0
        assert result["errors"] == 0
        assert result["figures"] == []

    def test_marks_released_and_notifies(self, db_session, catalog, test_user, other_user):
        figure = catalog["figures"]["nendo_miku"]
        db_session.add_all([
            UserFigure(user_id=test_user.id, figure_id=figure.id, status="PREORDER", preorder_month="2025-03"),
            UserFigure(user_id=other_user.id, figure_id=figure.id, status="OWNED"),
        ])
        db_session.commit()

        result = ReleaseBatchProcessor(db_session, today=date(2025, 4, 1)).run()

        assert result["total"] == 1
        assert result["released"] == 1
        assert result["notifications"] == 1
        assert result["errors"] == 0
        assert result["figures"][0]["release_date"] == "2025-03"

        db_session.expire_all()
        assert db_session.query(Figure).filter(Figure.id == figure.id).first().is_released is True
        notification = db_session.query(Notification).one()
        assert notification.user_id == test_user.id
        assert notification.figure_id == figure.id

    def test_pending_and_released_skipped(self, db_session, catalog):
        """承認待ち・発売済みは対象外"""
        result = ReleaseBatchProcessor(db_session, today=date(2030, 1, 1)).run()
        names = [f["figure_name"] for f in result["figures"]]
        assert names == ["Nendoroid Hatsune Miku"]

    def test_clears_catalog_cache(self, db_session, catalog):
        catalog_cache.set("catalog:facets", {"stale": True})
        ReleaseBatchProcessor(db_session, today=date(2025, 4, 1)).run()
        assert catalog_cache.get("catalog:facets") is None
