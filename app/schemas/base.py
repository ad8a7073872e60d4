"""Base schema"""
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """ORMオブジェクトから読み込める共通ベース"""
    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    """汎用メッセージレスポンス"""
    success: bool
    message: str
