"""
発売状況更新バッチ処理
発売日を過ぎた未発売フィギュアを発売済みにし、コレクション登録者へ通知する
"""
import logging
from datetime import date, datetime
from typing import List, Dict, Any, Optional
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.models.base import ContentStatus
from app.models.figure import Figure
from app.services.cache_service import catalog_cache
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def is_release_due(figure: Figure, today: date) -> bool:
    """
    発売日を過ぎているか判定

    日まで分かっている場合はその日以降、月までの場合はその月の翌月以降、
    年のみの場合は翌年以降を「過ぎた」とみなす
    """
    if not figure.release_year:
        return False
    if figure.release_month and figure.release_day:
        try:
            return date(figure.release_year, figure.release_month, figure.release_day) <= today
        except ValueError:
            logger.warning(f"不正な発売日: figure={figure.id} {figure.release_date}")
            return False
    if figure.release_month:
        return (figure.release_year, figure.release_month) < (today.year, today.month)
    return figure.release_year < today.year


class ReleaseBatchProcessor:
    """発売状況更新バッチ処理クラス"""

    def __init__(self, db: Session, today: Optional[date] = None):
        self.db = db
        self.today = today or date.today()
        self.released_count = 0
        self.notification_count = 0
        self.error_count = 0
        self.released: List[Dict[str, Any]] = []

    def get_due_figures(self) -> List[Figure]:
        """発売日を過ぎた未発売の承認済みフィギュアを取得"""
        candidates = self.db.query(Figure).filter(
            Figure.status == ContentStatus.APPROVED.value,
            Figure.is_released == False,  # noqa: E712
            Figure.release_year.isnot(None),
            Figure.release_year <= self.today.year,
        ).all()

        due = [f for f in candidates if is_release_due(f, self.today)]
        logger.info(f"発売日経過フィギュア数: {len(due)}（候補 {len(candidates)}）")
        return due

    def process_figure(self, figure: Figure) -> bool:
        """1フィギュアを発売済みにして通知を作成"""
        try:
            figure.is_released = True
            results = NotificationService(self.db).notify_figure_released(figure, commit=False)

            self.released_count += 1
            self.notification_count += len(results)
            self.released.append({
                "figure_id": figure.id,
                "figure_name": figure.name,
                "release_date": figure.release_date,
                "notified": len(results),
            })
            logger.info(f"発売済みに更新: {figure.name[:40]} ({figure.release_date})")
            return True

        except Exception as e:
            logger.error(f"処理エラー: {figure.name[:30]}... - {str(e)}")
            self.error_count += 1
            return False

    def run(self) -> Dict[str, Any]:
        """バッチ処理を実行"""
        logger.info("=" * 50)
        logger.info("発売状況更新バッチ処理を開始")
        logger.info("=" * 50)

        start_time = datetime.now()

        figures = self.get_due_figures()

        if not figures:
            return {
                "status": "completed",
                "message": "処理対象のフィギュアがありません",
                "total": 0,
                "released": 0,
                "notifications": 0,
                "errors": 0,
                "figures": [],
            }

        for i, figure in enumerate(figures, 1):
            logger.info(f"[{i}/{len(figures)}] {figure.name[:40]}...")
            self.process_figure(figure)

        try:
            self.db.commit()
            logger.info("データベースにコミットしました")
        except Exception as e:
            logger.error(f"コミットエラー: {str(e)}")
            self.db.rollback()
            raise

        # カタログの集計結果が変わるためキャッシュを破棄
        catalog_cache.clear()

        end_time = datetime.now()
        duration = (end_time - start_time).total_seconds()

        result = {
            "status": "completed",
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
            "duration_seconds": duration,
            "total": len(figures),
            "released": self.released_count,
            "notifications": self.notification_count,
            "errors": self.error_count,
            "figures": self.released,
        }

        logger.info("=" * 50)
        logger.info("バッチ処理完了")
        logger.info(f"  処理件数: {result['total']}")
        logger.info(f"  発売済み更新: {result['released']}")
        logger.info(f"  通知作成: {result['notifications']}件")
        logger.info(f"  エラー: {result['errors']}")
        logger.info(f"  処理時間: {duration:.2f}秒")
        logger.info("=" * 50)

        return result


def run_release_update_batch(today: Optional[date] = None) -> Dict[str, Any]:
    """バッチ処理を実行するエントリーポイント"""
    db = SessionLocal()
    try:
        processor = ReleaseBatchProcessor(db, today=today)
        return processor.run()
    finally:
        db.close()
