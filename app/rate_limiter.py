"""
レート制限設定
ログイン・登録エンドポイントをリモートアドレス単位で制限する
"""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

# 認証系の制限値
LOGIN_RATE_LIMIT = "10/minute"
REGISTER_RATE_LIMIT = "5/minute"

# レート制限インスタンス
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
