"""
FastAPI メインアプリケーション
FiguraCollect - フィギュアカタログ・コレクション管理アプリ
"""

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy import text
from contextlib import asynccontextmanager
import logging
from datetime import datetime
from dotenv import load_dotenv

load_dotenv()

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.database import get_db, engine
from app.rate_limiter import limiter
from app.auth import router as auth_router
from app.routers.admin import router as admin_router
from app.routers.brands import router as brands_router
from app.routers.calendar import router as calendar_router
from app.routers.characters import router as characters_router
from app.routers.figures import router as figures_router
from app.routers.home import router as home_router
from app.routers.inventory import router as inventory_router
from app.routers.lines import router as lines_router
from app.routers.lists import router as lists_router
from app.routers.notifications import router as notifications_router
from app.routers.reviews import router as reviews_router
from app.routers.search import router as search_router
from app.routers.series import router as series_router
from app.routers.tags import router as tags_router
from app.routers.timeline import router as timeline_router
from app.routers.user import router as user_router

# スケジューラー
from app.services.scheduler_service import start_scheduler, stop_scheduler

# ログ設定
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# ============================================
# ライフサイクル管理
# ============================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションの起動・終了処理"""
    logger.info("🚀 FiguraCollect Backend starting...")
    logger.info(f"Database engine: {engine.url.render_as_string(hide_password=True)}")

    # DB接続テスト
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            logger.info("✅ Database connection test successful")
    except Exception as e:
        logger.error(f"❌ Database connection test failed: {e}")

    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    else:
        logger.info("📅 スケジューラーは無効です")

    yield

    logger.info("👋 FiguraCollect Backend shutting down...")
    stop_scheduler()
    engine.dispose()


# ============================================
# FastAPI アプリケーション
# ============================================
app = FastAPI(
    title="FiguraCollect API",
    description="フィギュアカタログ・コレクション管理アプリ",
    version=settings.VERSION,
    lifespan=lifespan,
)

# レート制限
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=3600,
)

# ルータ登録
app.include_router(auth_router)
app.include_router(user_router)  # ユーザー設定API
app.include_router(figures_router)
app.include_router(brands_router)
app.include_router(lines_router)
app.include_router(series_router)
app.include_router(characters_router)
app.include_router(tags_router)
app.include_router(search_router)
app.include_router(inventory_router)
app.include_router(lists_router)
app.include_router(reviews_router)
app.include_router(notifications_router)
app.include_router(calendar_router)
app.include_router(timeline_router)
app.include_router(home_router)
app.include_router(admin_router)


# ============================================
# 基本エンドポイント
# ============================================
@app.get("/")
async def root():
    """ルートエンドポイント"""
    return {
        "message": "FiguraCollect Backend API",
        "version": settings.VERSION,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "health": "/api/health",
            "db_health": "/api/db/health",
            "figures": "/api/figures",
            "search": "/api/search",
            "home": "/api/home",
        },
    }


@app.get("/api/health")
async def health_check():
    """ヘルスチェックエンドポイント"""
    return {
        "status": "ok",
        "service": "FiguraCollect Backend",
        "timestamp": datetime.now().isoformat(),
    }


# ============================================
# データベース関連エンドポイント
# ============================================
@app.get("/api/db/health")
def db_health_check(db: Session = Depends(get_db)):
    """データベース接続確認エンドポイント"""
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "connected",
            "dialect": engine.dialect.name,
            "message": "Database connection successful",
        }
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return {"status": "error", "message": str(e)}


# ============================================
# 開発サーバー起動
# ============================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info"
    )
