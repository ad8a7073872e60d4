"""
システム設定サービス
キー/値（JSON）形式の設定を読み書きする
"""
import json
import logging
from typing import Any, Dict
from sqlalchemy.orm import Session

from app.models.system_config import SystemConfiguration

logger = logging.getLogger(__name__)

SHOW_PENDING_FIGURES = "SHOW_PENDING_FIGURES"

# 設定可能なキーとデフォルト値
KNOWN_CONFIG_KEYS: Dict[str, Any] = {
    SHOW_PENDING_FIGURES: False,
}


def get_config(db: Session, key: str) -> Any:
    """設定値を取得（未設定ならデフォルト値）"""
    row = db.query(SystemConfiguration).filter(SystemConfiguration.key == key).first()
    if row is None:
        return KNOWN_CONFIG_KEYS.get(key)
    try:
        return json.loads(row.value)
    except json.JSONDecodeError:
        logger.warning(f"設定値のJSONが不正です: key={key}")
        return KNOWN_CONFIG_KEYS.get(key)


def get_all_configs(db: Session) -> Dict[str, Any]:
    return {key: get_config(db, key) for key in KNOWN_CONFIG_KEYS}


def set_config(db: Session, key: str, value: Any) -> SystemConfiguration:
    """
    設定値を保存（upsert）

    Raises:
        KeyError: 未知のキーの場合
    """
    if key not in KNOWN_CONFIG_KEYS:
        raise KeyError(key)

    row = db.query(SystemConfiguration).filter(SystemConfiguration.key == key).first()
    if row is None:
        row = SystemConfiguration(key=key, value=json.dumps(value))
        db.add(row)
    else:
        row.value = json.dumps(value)
    db.commit()
    db.refresh(row)

    logger.info(f"システム設定更新: {key}={value!r}")
    return row


def show_pending_figures(db: Session) -> bool:
    """承認待ちフィギュアも公開カタログに表示するか"""
    return bool(get_config(db, SHOW_PENDING_FIGURES))
