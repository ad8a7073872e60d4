"""
デモデータ投入スクリプト

ブランド・製品ライン・作品・キャラクター・タグ・フィギュアと
スーパー管理者ユーザー、おすすめリストを作成する。既に存在するものはスキップ

使い方:
    python -m app.scripts.seed

管理者のパスワードは SEED_ADMIN_PASSWORD で指定（省略時は changeme123）
"""
import os
import sys

from dotenv import load_dotenv
load_dotenv()

from app.auth import hash_password
from app.database import Base, SessionLocal, engine
from app.models import (
    Brand,
    Character,
    Figure,
    FigureImage,
    FigureList,
    ListItem,
    Line,
    Series,
    Tag,
    User,
)
from app.models.base import ContentStatus, Currency, UserRole
from app.utils import slugify

ADMIN_EMAIL = "admin@figuracollect.local"

BRANDS = [
    {"name": "Good Smile Company", "country": "Japón"},
    {"name": "Max Factory", "country": "Japón"},
    {"name": "Bandai Spirits", "country": "Japón"},
]

LINES = [
    {"name": "Nendoroid", "brand": "Good Smile Company", "release_year": 2006},
    {"name": "POP UP PARADE", "brand": "Good Smile Company", "release_year": 2020},
    {"name": "figma", "brand": "Max Factory", "release_year": 2008},
    {"name": "S.H.Figuarts", "brand": "Bandai Spirits", "release_year": 2008},
]

SERIES = ["Hatsune Miku", "Chainsaw Man", "Dragon Ball Z"]

CHARACTERS = [
    {"name": "Hatsune Miku", "series": "Hatsune Miku"},
    {"name": "Power", "series": "Chainsaw Man"},
    {"name": "Son Goku", "series": "Dragon Ball Z"},
]

TAGS = ["PVC", "Articulada", "Edición limitada"]

FIGURES = [
    {
        "name": "Nendoroid Hatsune Miku: Magical Mirai 2024",
        "line": "Nendoroid", "character": "Hatsune Miku", "series": ["Hatsune Miku"],
        "tags": ["PVC"], "price_yen": 6800, "price_mxn": 1500,
        "release": (2025, 3, None), "height_cm": 10.0,
    },
    {
        "name": "POP UP PARADE Power",
        "line": "POP UP PARADE", "character": "Power", "series": ["Chainsaw Man"],
        "tags": ["PVC"], "price_yen": 4500, "price_mxn": 1100,
        "release": (2024, 11, 20), "height_cm": 17.0,
    },
    {
        "name": "figma Hatsune Miku 2.0",
        "line": "figma", "character": "Hatsune Miku", "series": ["Hatsune Miku"],
        "tags": ["PVC", "Articulada"], "price_yen": 7700, "price_mxn": 1800,
        "release": (2026, None, None), "height_cm": 14.0,
    },
    {
        "name": "S.H.Figuarts Son Goku -A Saiyan Raised on Earth-",
        "line": "S.H.Figuarts", "character": "Son Goku", "series": ["Dragon Ball Z"],
        "tags": ["Articulada", "Edición limitada"], "price_yen": 6600, "price_usd": 55,
        "release": (2024, 6, 15), "height_cm": 14.0,
    },
]


def get_or_create(db, model, lookup: dict, defaults: dict):
    instance = db.query(model).filter_by(**lookup).first()
    if instance:
        return instance, False
    instance = model(**lookup, **defaults)
    db.add(instance)
    db.flush()
    return instance, True


def seed(db) -> dict:
    """デモデータを投入して作成件数を返す"""
    created = {"brands": 0, "lines": 0, "series": 0, "characters": 0, "tags": 0, "figures": 0}
    approved = ContentStatus.APPROVED.value

    admin, _ = get_or_create(db, User, {"email": ADMIN_EMAIL}, {
        "username": "admin",
        "password_hash": hash_password(os.getenv("SEED_ADMIN_PASSWORD", "changeme123")),
        "name": "Admin",
        "country": "México",
        "role": UserRole.SUPERADMIN.value,
        "email_verified": True,
    })

    brands = {}
    for data in BRANDS:
        brands[data["name"]], is_new = get_or_create(db, Brand, {"slug": slugify(data["name"])}, {
            "name": data["name"], "country": data["country"], "status": approved,
            "created_by_id": admin.id,
        })
        created["brands"] += is_new

    lines = {}
    for data in LINES:
        lines[data["name"]], is_new = get_or_create(db, Line, {"slug": slugify(data["name"])}, {
            "name": data["name"], "brand_id": brands[data["brand"]].id,
            "release_year": data["release_year"], "status": approved, "created_by_id": admin.id,
        })
        created["lines"] += is_new

    series = {}
    for name in SERIES:
        series[name], is_new = get_or_create(db, Series, {"slug": slugify(name)}, {
            "name": name, "status": approved, "created_by_id": admin.id,
        })
        created["series"] += is_new

    characters = {}
    for data in CHARACTERS:
        characters[data["name"]], is_new = get_or_create(db, Character, {"slug": slugify(data["name"])}, {
            "name": data["name"], "series_id": series[data["series"]].id,
            "status": approved, "created_by_id": admin.id,
        })
        created["characters"] += is_new

    tags = {}
    for name in TAGS:
        tags[name], is_new = get_or_create(db, Tag, {"name": name}, {})
        created["tags"] += is_new

    figures = []
    for data in FIGURES:
        figure = db.query(Figure).filter(Figure.name == data["name"]).first()
        if figure is None:
            line = lines[data["line"]]
            year, month, day = data["release"]
            figure = Figure(
                name=data["name"],
                brand_id=line.brand_id,
                line_id=line.id,
                character_id=characters[data["character"]].id,
                price_mxn=data.get("price_mxn"),
                price_usd=data.get("price_usd"),
                price_yen=data.get("price_yen"),
                original_price_currency=Currency.YEN.value,
                release_year=year,
                release_month=month,
                release_day=day,
                height_cm=data.get("height_cm"),
                status=approved,
                created_by_id=admin.id,
                approved_by_id=admin.id,
            )
            figure.tags = [tags[name] for name in data["tags"]]
            figure.series = [series[name] for name in data["series"]]
            figure.images = [FigureImage(url=f"https://placehold.co/600x800?text={slugify(data['name'])}", order=0)]
            db.add(figure)
            db.flush()
            created["figures"] += 1
        figures.append(figure)

    featured, is_new = get_or_create(db, FigureList, {"name": "Lo mejor de Miku"}, {
        "description": "Selección oficial de figuras de Hatsune Miku",
        "is_official": True,
        "is_featured": True,
        "created_by_id": admin.id,
    })
    if is_new:
        miku = [f for f in figures if "Miku" in f.name]
        featured.items = [ListItem(figure_id=f.id, order=i) for i, f in enumerate(miku)]

    db.commit()
    return created


def main():
    """メイン処理"""
    print("🌱 デモデータ投入")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = seed(db)
        for key, count in created.items():
            print(f"   {key}: {count}件作成")
        print("✅ 完了")
        return 0
    except Exception as e:
        db.rollback()
        print(f"❌ エラーが発生しました: {str(e)}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
