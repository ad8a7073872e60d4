"""
バッチスケジューラーサービス

APSchedulerを使用して定期バッチ処理を実行する
- 発売状況更新: 毎日 3:00

同時実行防止のため、ジョブはロックで排他制御する
"""

import logging
import threading
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from datetime import datetime

logger = logging.getLogger(__name__)

# スケジューラーインスタンス（グローバル）
scheduler = BackgroundScheduler()

# バッチの排他制御用ロック
batch_lock = threading.Lock()


def run_release_update_job():
    """
    発売状況更新ジョブ

    発売日を過ぎたフィギュアを発売済みにし、ウィッシュリスト・予約ユーザーへ通知する
    """
    # ロックを取得（同時実行を防止）
    acquired = batch_lock.acquire(blocking=False)
    if not acquired:
        logger.warning("⏳ 発売状況更新: 他のジョブが実行中のためスキップ")
        return

    try:
        from app.services.release_batch import run_release_update_batch

        logger.info(f"📦 発売状況更新バッチ開始: {datetime.now().isoformat()}")

        result = run_release_update_batch()

        logger.info(
            f"✅ 発売状況更新完了: "
            f"対象={result['total']}, 発売済み={result['released']}, "
            f"通知={result['notifications']}, エラー={result['errors']}"
        )
    except Exception as e:
        logger.error(f"❌ 発売状況更新バッチエラー: {str(e)}")
    finally:
        batch_lock.release()


def start_scheduler():
    """スケジューラーを開始"""
    if scheduler.running:
        logger.warning("スケジューラーは既に実行中です")
        return

    # 発売状況更新: 毎日 3:00
    scheduler.add_job(
        run_release_update_job,
        trigger=CronTrigger(hour=3, minute=0),
        id="release_update",
        name="発売状況更新バッチ",
        replace_existing=True,
        max_instances=1,  # 同時に1インスタンスのみ
    )

    scheduler.start()
    logger.info("📅 スケジューラー開始")
    logger.info("   - 発売状況更新バッチ: 毎日 3:00")


def stop_scheduler():
    """スケジューラーを停止"""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("📅 スケジューラー停止")


def get_scheduler_status() -> dict:
    """スケジューラーの状態を取得"""
    jobs = []
    if scheduler.running:
        for job in scheduler.get_jobs():
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
            })

    return {
        "running": scheduler.running,
        "jobs": jobs,
    }
