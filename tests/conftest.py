"""
テスト用の共通設定・フィクスチャ
"""

import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# テスト用の環境変数を設定（app.mainをインポートする前に設定）
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("RESEND_API_KEY", "test-resend-api-key")
os.environ["EMAIL_ENABLED"] = "false"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from app.main import app
from app.database import get_db, Base
from app.auth import create_user_token, hash_password
from app.models import (
    Brand,
    Character,
    Figure,
    FigureImage,
    Line,
    Series,
    Tag,
    User,
)
from app.models.base import ContentStatus, UserRole
from app.services.cache_service import catalog_cache


# テスト用のインメモリSQLiteデータベース
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "testpassword123"


def override_get_db():
    """テスト用のDBセッションを提供"""
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clear_catalog_cache():
    """テスト間でファセットのキャッシュを持ち越さない"""
    catalog_cache.clear()
    yield
    catalog_cache.clear()


@pytest.fixture(scope="function")
def db_session():
    """各テスト用のDBセッション"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """テスト用のAPIクライアント"""
    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ========================================
# ユーザー
# ========================================

@pytest.fixture
def make_user(db_session):
    """ロールを指定してユーザーを作成するファクトリ"""
    def _make_user(username: str, role: str = UserRole.USER.value) -> User:
        user = User(
            email=f"{username}@example.com",
            username=username,
            password_hash=hash_password(TEST_PASSWORD),
            name=username.capitalize(),
            country="México",
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user
    return _make_user


def headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def test_user(make_user):
    return make_user("collector")


@pytest.fixture
def other_user(make_user):
    return make_user("otheruser")


@pytest.fixture
def admin_user(make_user):
    return make_user("moderator", UserRole.ADMIN.value)


@pytest.fixture
def superadmin_user(make_user):
    return make_user("owner", UserRole.SUPERADMIN.value)


@pytest.fixture
def auth_headers(test_user):
    """認証ヘッダーを取得"""
    return headers_for(test_user)


@pytest.fixture
def other_headers(other_user):
    return headers_for(other_user)


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture
def superadmin_headers(superadmin_user):
    return headers_for(superadmin_user)


# ========================================
# カタログデータ
# ========================================

@pytest.fixture
def catalog(db_session):
    """
    承認済みのブランド2・ライン3・作品2・キャラクター1・タグ1と
    フィギュア4体（うち1体は承認待ち）を作成
    """
    approved = ContentStatus.APPROVED.value
    gsc = Brand(name="Good Smile Company", slug="good-smile-company", country="Japón", status=approved)
    bandai = Brand(name="Bandai Spirits", slug="bandai-spirits", country="Japón", status=approved)
    db_session.add_all([gsc, bandai])
    db_session.flush()

    nendoroid = Line(name="Nendoroid", slug="nendoroid", brand_id=gsc.id, status=approved)
    popup = Line(name="POP UP PARADE", slug="pop-up-parade", brand_id=gsc.id, status=approved)
    figuarts = Line(name="S.H.Figuarts", slug="s-h-figuarts", brand_id=bandai.id, status=approved)
    miku_series = Series(name="Hatsune Miku", slug="hatsune-miku", status=approved)
    dbz = Series(name="Dragon Ball Z", slug="dragon-ball-z", status=approved)
    tag = Tag(name="PVC")
    db_session.add_all([nendoroid, popup, figuarts, miku_series, dbz, tag])
    db_session.flush()

    miku = Character(name="Hatsune Miku", slug="hatsune-miku", series_id=miku_series.id, status=approved)
    db_session.add(miku)
    db_session.flush()

    now = datetime.utcnow()
    nendo_miku = Figure(
        name="Nendoroid Hatsune Miku",
        brand_id=gsc.id, line_id=nendoroid.id, character_id=miku.id,
        price_mxn=1500, price_yen=6800,
        release_year=2025, release_month=3,
        height_cm=10.0, width_cm=8.0, depth_cm=6.0,
        status=approved, created_at=now - timedelta(days=3),
    )
    nendo_miku.images = [
        FigureImage(url="https://img.example.com/miku-1.jpg", order=0),
        FigureImage(url="https://img.example.com/miku-2.jpg", order=1),
    ]
    nendo_miku.tags = [tag]
    nendo_miku.series = [miku_series]

    popup_miku = Figure(
        name="POP UP PARADE Hatsune Miku",
        brand_id=gsc.id, line_id=popup.id, character_id=miku.id,
        price_mxn=900, price_yen=4500,
        release_year=2024, release_month=11, release_day=20,
        is_released=True,
        status=approved, created_at=now - timedelta(days=2),
    )
    popup_miku.series = [miku_series]

    goku = Figure(
        name="S.H.Figuarts Son Goku",
        brand_id=bandai.id, line_id=figuarts.id,
        price_mxn=2200, price_usd=55,
        status=approved, created_at=now - timedelta(days=1),
    )
    goku.series = [dbz]

    pending = Figure(
        name="Nendoroid Pending Prototype",
        brand_id=gsc.id, line_id=nendoroid.id,
        price_mxn=1300,
        release_year=2026,
        status=ContentStatus.PENDING.value, created_at=now,
    )
    db_session.add_all([nendo_miku, popup_miku, goku, pending])
    db_session.commit()

    return {
        "brands": {"gsc": gsc, "bandai": bandai},
        "lines": {"nendoroid": nendoroid, "popup": popup, "figuarts": figuarts},
        "series": {"miku": miku_series, "dbz": dbz},
        "character": miku,
        "tag": tag,
        "figures": {
            "nendo_miku": nendo_miku,
            "popup_miku": popup_miku,
            "goku": goku,
            "pending": pending,
        },
    }
