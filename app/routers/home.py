"""
Home API エンドポイント
ホームセクション設定を表示用データに解決して返す
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_optional_user
from app.models.user import User
from app.schemas.home_section import HomeResponse
from app.services.catalog_service import visible_figure_statuses
from app.services.home_section_service import HomeSectionResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/home", tags=["Home"])


@router.get("", response_model=HomeResponse)
def get_home(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    ホームページのセクション一覧

    表示中のセクションを order 順に解決する。未設定ならデフォルト構成
    """
    statuses = visible_figure_statuses(db, current_user)
    sections = HomeSectionResolver(db, statuses).resolve_page()
    return HomeResponse(sections=sections)
