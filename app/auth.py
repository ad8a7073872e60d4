from fastapi import APIRouter, Depends, HTTPException, status, Header, Cookie, Request, Response
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, Field
from datetime import datetime, timedelta, timezone
from typing import Optional
import jwt
import bcrypt
import secrets
import logging

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.models.base import UserRole
from app.rate_limiter import limiter, LOGIN_RATE_LIMIT, REGISTER_RATE_LIMIT
from app.schemas.user import UserResponse
from app.services.email_service import email_service

logger = logging.getLogger(__name__)

# JWT設定
SECRET_KEY = settings.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES  # 7日
AUTH_COOKIE_NAME = settings.AUTH_COOKIE_NAME


# Pydanticモデル
class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=30, pattern=r"^[a-zA-Z0-9_]+$")
    password: str = Field(..., min_length=8, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=100)
    bio: Optional[str] = Field(None, max_length=2000)


class VerifyRequest(BaseModel):
    token: Optional[str] = None


class AuthResponse(BaseModel):
    success: bool
    message: str
    token: Optional[str] = None
    user: Optional[UserResponse] = None


class MessageResponse(BaseModel):
    success: bool
    message: str


router = APIRouter(prefix="/auth", tags=["auth"])


# パスワードハッシュ化
def hash_password(password: str) -> str:
    """パスワードをハッシュ化"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hashed_password: str) -> bool:
    """パスワード検証"""
    return bcrypt.checkpw(password.encode(), hashed_password.encode())


# JWTトークン生成
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """アクセストークン生成"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def create_user_token(user: User) -> str:
    """ユーザー情報を載せたアクセストークン"""
    return create_access_token(
        data={
            "sub": user.id,
            "email": user.email,
            "username": user.username,
            "role": user.role,
        },
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
    )


def extract_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    """Authorization ヘッダー（優先）またはクッキーからトークンを取り出す"""
    if authorization:
        # Bearer トークンの場合は "Bearer " プレフィックスを削除
        if authorization.startswith("Bearer "):
            return authorization[7:]
        return authorization
    return cookie_token


def decode_user(token: str, db: Session) -> Optional[User]:
    """トークンを検証してユーザーを取得（無効なら None）"""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    user_id = payload.get("sub")
    if user_id is None:
        return None
    return db.query(User).filter(User.id == user_id).first()


def get_current_user(
    authorization: Optional[str] = Header(None),
    auth_token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    db: Session = Depends(get_db),
):
    """トークンからユーザー取得"""
    token = extract_token(authorization, auth_token)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="認証トークンが必要です",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = decode_user(token, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="認証情報が無効です",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/login", response_model=AuthResponse)
@limiter.limit(LOGIN_RATE_LIMIT)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
):
    """ユーザーログイン"""
    # ユーザー取得
    user = db.query(User).filter(User.email == body.email).first()

    # パスワード検証
    if not user or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="メールアドレスまたはパスワードが正しくありません",
        )

    # トークン生成
    access_token = create_user_token(user)
    set_auth_cookie(response, access_token)

    logger.info(f"ログイン: user_id={user.id}")
    return AuthResponse(
        success=True,
        message="ログインに成功しました",
        token=access_token,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(REGISTER_RATE_LIMIT)
def register(
    request: Request,
    response: Response,
    body: RegisterRequest,
    db: Session = Depends(get_db),
):
    """ユーザー登録（確認メールを送信）"""
    # メール重複チェック
    if db.query(User).filter(User.email == body.email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="このメールアドレスは既に登録されています",
        )

    # ユーザー名重複チェック
    if db.query(User).filter(User.username == body.username).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="このユーザー名は既に使われています",
        )

    new_user = User(
        email=body.email,
        username=body.username,
        password_hash=hash_password(body.password),
        name=body.name,
        country=body.country,
        bio=body.bio,
        role=UserRole.USER.value,
        email_verified=False,
        verify_token=secrets.token_urlsafe(32),
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    # 確認メール（失敗しても登録は成功扱い）
    email_result = email_service.send_verification_email(
        to=new_user.email,
        username=new_user.username,
        token=new_user.verify_token,
    )
    if not email_result.get("success"):
        logger.warning(f"確認メール未送信: user_id={new_user.id}, reason={email_result.get('error')}")

    access_token = create_user_token(new_user)
    set_auth_cookie(response, access_token)

    logger.info(f"ユーザー登録: user_id={new_user.id}")
    return AuthResponse(
        success=True,
        message="登録に成功しました。確認メールをご確認ください",
        token=access_token,
        user=UserResponse.model_validate(new_user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """ログアウト（クッキー削除）"""
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return MessageResponse(success=True, message="ログアウトしました")


@router.post("/verify", response_model=MessageResponse)
def verify_email(body: VerifyRequest, db: Session = Depends(get_db)):
    """メールアドレス確認"""
    if not body.token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="確認トークンが必要です",
        )

    user = db.query(User).filter(User.verify_token == body.token).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="確認トークンが無効です",
        )

    user.email_verified = True
    user.verify_token = None
    db.commit()

    logger.info(f"メールアドレス確認完了: user_id={user.id}")
    return MessageResponse(success=True, message="メールアドレスを確認しました")


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """現在のログインユーザー情報を取得"""
    return UserResponse.model_validate(current_user)
