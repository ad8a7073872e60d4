"""
共通ユーティリティ
スラッグ生成・価格/発売日フォーマット・寸法変換・評価平均
"""
import re
from datetime import date
from typing import Iterable, Optional

from app.models.base import Currency, InventoryStatus

# 発売日表示はスペイン語の月名
MONTH_NAMES = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]

CM_TO_INCH = 0.393701
INCH_TO_CM = 2.54

INVENTORY_STATUSES = [s.value for s in InventoryStatus]

_RELEASE_DATE_PATTERN = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?$")
_MONTH_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def slugify(text: str) -> str:
    """名前からURL用スラッグを生成"""
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_price(price: Optional[float], currency: str) -> str:
    """通貨記号付きの価格文字列（未設定は N/A）"""
    if price is None:
        return "N/A"
    if currency == Currency.MXN.value:
        return f"${_format_number(price)} MXN"
    if currency == Currency.USD.value:
        return f"${_format_number(price)} USD"
    return f"¥{_format_number(price)}"


def format_figure_price(figure) -> Optional[str]:
    """フィギュアの元通貨で価格を表示（価格未設定なら None）"""
    currency = figure.original_price_currency or Currency.YEN.value
    price = {
        Currency.MXN.value: figure.price_mxn,
        Currency.USD.value: figure.price_usd,
    }.get(currency, figure.price_yen)
    if not price:
        return None
    return format_price(price, currency)


def parse_release_date(value: str) -> tuple[int, Optional[int], Optional[int]]:
    """
    "YYYY" / "YYYY-MM" / "YYYY-MM-DD" を (年, 月, 日) に分解

    Raises:
        ValueError: 形式が不正、または月日が範囲外の場合
    """
    match = _RELEASE_DATE_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"invalid release date: {value}")
    year = int(match.group(1))
    month = int(match.group(2)) if match.group(2) else None
    day = int(match.group(3)) if match.group(3) else None
    if month is not None and not 1 <= month <= 12:
        raise ValueError(f"invalid release month: {value}")
    if day is not None:
        # 存在しない日付は date() が弾く
        date(year, month, day)
    return year, month, day


def parse_month_key(value: str) -> tuple[int, int]:
    """"YYYY-MM" を (年, 月) に分解"""
    match = _MONTH_KEY_PATTERN.match(value)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise ValueError(f"invalid month: {value}")
    return int(match.group(1)), int(match.group(2))


def format_release_date(release_date: Optional[str]) -> str:
    """発売日を「Marzo 2025」形式で表示（未定は TBA）"""
    if not release_date:
        return "TBA"
    parts = release_date.split("-")
    if len(parts) < 2:
        return parts[0]
    return f"{MONTH_NAMES[int(parts[1]) - 1]} {parts[0]}"


def get_month_name(month_key: str) -> str:
    year, month = parse_month_key(month_key)
    return f"{MONTH_NAMES[month - 1]} {year}"


def cm_to_inches(cm: float) -> float:
    return round(cm * CM_TO_INCH, 2)


def inches_to_cm(inches: float) -> float:
    return round(inches * INCH_TO_CM, 2)


def convert_measure(value_cm: Optional[float], unit: str) -> Optional[float]:
    """DB保存値（cm）を指定単位に変換"""
    if value_cm is None:
        return None
    return value_cm if unit == "cm" else cm_to_inches(value_cm)


def format_dimensions(
    height_cm: Optional[float],
    width_cm: Optional[float],
    depth_cm: Optional[float],
    unit: str,
) -> str:
    """高さ × 幅 × 奥行 を単位付きで表示"""
    parts = [
        f"{convert_measure(v, unit)}"
        for v in (height_cm, width_cm, depth_cm)
        if v is not None
    ]
    if not parts:
        return "-"
    return f"{' × '.join(parts)} {unit}"


def average_rating(ratings: Iterable[int]) -> Optional[float]:
    """評価の平均（レビューなしは None）"""
    values = list(ratings)
    if not values:
        return None
    return round(sum(values) / len(values), 2)


def is_valid_inventory_status(value: Optional[str]) -> bool:
    return value in INVENTORY_STATUSES
